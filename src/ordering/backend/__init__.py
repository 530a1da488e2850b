"""Order and voucher service adapters.

- FakeOrderService / FakeVoucherService for development and testing
- HttpOrderService / HttpVoucherService for the real backend

Adapters are constructed by the caller and injected; there is no shared
module-level instance.
"""

from ordering.backend.fake_adapter import FakeOrderService, FakeVoucherService
from ordering.backend.http_adapter import HttpOrderService, HttpVoucherService
from ordering.backend.port import OrderService, VoucherService

__all__ = (
    "FakeOrderService",
    "FakeVoucherService",
    "HttpOrderService",
    "HttpVoucherService",
    "OrderService",
    "VoucherService",
)
