from app.models.user import User
from app.models.genre import Genre
from app.models.book import Book
from app.models.order import Order
from app.models.order_item import OrderItem
