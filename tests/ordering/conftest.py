import pytest
from identity.users.fake_adapter import FakeUserService
from ordering.backend.fake_adapter import FakeOrderService, FakeVoucherService
from ordering.checkout.coordinator import CheckoutCoordinator
from payments.gateway.fake_adapter import FakeMarketplaceGateway
from payments.payment.authorization import FakePaymentApprover


@pytest.fixture
def order_service():
    return FakeOrderService()


@pytest.fixture
def voucher_service():
    return FakeVoucherService()


@pytest.fixture
def gateway():
    return FakeMarketplaceGateway()


@pytest.fixture
def approver():
    return FakePaymentApprover()


@pytest.fixture
def user_service(seller_onboarded, buyer_profile):
    return FakeUserService([seller_onboarded, buyer_profile])


@pytest.fixture
def coordinator(order_service, user_service, gateway, approver, voucher_service, now):
    return CheckoutCoordinator(
        order_service=order_service,
        user_service=user_service,
        gateway=gateway,
        approver=approver,
        voucher_service=voucher_service,
        clock=lambda: now,
    )
