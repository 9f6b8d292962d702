from .shoppers import ShopperProfile
from .affiliates import Affiliate, AffiliateCoupon, AffiliateCommission, AffiliateOrder
from .orders import Order, OrderItem, Shipment
from .loyalty import LoyaltyWallet, LoyaltyTransaction
from .referrals import ReferralState

__all__ = [
    "ShopperProfile",
    "Affiliate",
    "AffiliateCoupon",
    "AffiliateCommission",
    "AffiliateOrder",
    "Order",
    "OrderItem",
    "Shipment",
    "LoyaltyWallet",
    "LoyaltyTransaction",
    "ReferralState",
]
