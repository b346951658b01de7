from django.urls import path
from .views import ShopListView, StorefrontView, MyShopView, MyProductsView, ProductDetailView

urlpatterns = [
    path('', ShopListView.as_view(), name='shop_list'),
    path('<int:seller_id>/', StorefrontView.as_view(), name='storefront'),
    path('manage/', MyShopView.as_view(), name='my_shop'),
    path('manage/products/', MyProductsView.as_view(), name='my_products'),
    path('manage/products/<int:pk>/', ProductDetailView.as_view(), name='product_detail'),
]
