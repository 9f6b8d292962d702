from .affiliates import (
    create_affiliate,
    create_affiliate_order,
    create_commission_entry,
    create_coupon_binding,
    get_active_coupon_binding,
    get_affiliate,
    get_affiliate_by_code,
    increment_affiliate_totals,
)
from .orders import create_order, create_order_items, create_shipment, get_order, get_order_by_number
from .loyalty import (
    compare_and_set_wallet,
    create_loyalty_transaction,
    create_wallet,
    deduct_wallet_atomic,
    get_wallet,
)
from .referrals import create_referral_state, delete_referral_state, get_referral_state
from .shoppers import create_shopper, get_shopper, get_shopper_by_email
