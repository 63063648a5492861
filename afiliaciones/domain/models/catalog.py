"""Catalog tables — read-only reference data (id + unique name)."""

from sqlalchemy import Column, Integer, String

from afiliaciones.infrastructure.database import Base


class CatalogMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.id} - {self.name}>"


class Company(CatalogMixin, Base):
    __tablename__ = "companies"


class Eps(CatalogMixin, Base):
    __tablename__ = "eps_list"


class Arl(CatalogMixin, Base):
    __tablename__ = "arl_list"


class Ccf(CatalogMixin, Base):
    __tablename__ = "ccf_list"


class PensionFund(CatalogMixin, Base):
    __tablename__ = "pension_fund_list"
