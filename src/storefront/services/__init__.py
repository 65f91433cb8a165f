from .doctor import run_doctor_checks
from .exporter import export_receipt, receipt_rows
from .product_view import ProductView

__all__ = ["ProductView", "export_receipt", "receipt_rows", "run_doctor_checks"]
