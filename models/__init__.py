from models.seller import Seller, SellerSettings, Theme
from models.size import SizeCategory, StandardSize
from models.color import StandardColor, ProductColor
from models.product import Product, ProductStatus, TemplateType, ProductType
from models.order import Order, OrderStatus, PaymentStatus
from models.rating import Rating
from models.product_view import ProductView
