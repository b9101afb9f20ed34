"""Application models package."""

from catalog_tracer.models.actor import Agent, User
from catalog_tracer.models.change_record import ChangeRecord
from catalog_tracer.models.knowledge import DetailKnowledge, JenisDetailKnowledge, Knowledge, ProdukJenisDetailKnowledge
from catalog_tracer.models.product import Brand, DetailProduk, KategoriProduk, Produk, SubkategoriProduk
from catalog_tracer.models.quality_training import (
    DetailQualityTraining,
    JenisQualityTraining,
    QualityTraining,
    SubdetailQualityTraining,
)
from catalog_tracer.models.sop import SOP, DetailSOP, JenisSOP, KategoriSOP

__all__ = [
    "User", "Agent", "ChangeRecord",
    "Brand", "KategoriProduk", "SubkategoriProduk", "Produk", "DetailProduk",
    "Knowledge", "DetailKnowledge", "JenisDetailKnowledge", "ProdukJenisDetailKnowledge",
    "KategoriSOP", "SOP", "JenisSOP", "DetailSOP",
    "QualityTraining", "JenisQualityTraining", "DetailQualityTraining", "SubdetailQualityTraining",
]
