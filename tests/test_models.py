"""
Model metadata tests.
"""

from models import Base, Invoice, Payment, Proof
from models.base import new_id


def test_tables_are_named_by_models():
    assert set(Base.metadata.tables) == {"invoices", "payments", "proofs"}
    assert Invoice.__table__.name == "invoices"
    assert Payment.__table__.name == "payments"
    assert Proof.__table__.name == "proofs"


def test_new_id_is_unique_uuid_string():
    first, second = new_id(), new_id()
    assert first != second
    assert len(first) == 36
