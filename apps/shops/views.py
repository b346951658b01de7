from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from .models import Shop, Product
from .serializers import ShopSerializer, ProductSerializer, StorefrontSerializer
from core.utils import IsSeller
import logging

logger = logging.getLogger(__name__)


class ShopListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Browse all shops.",
        responses={200: ShopSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        shops = Shop.objects.select_related('seller')
        return Response(ShopSerializer(shops, many=True).data)


class StorefrontView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="A shop with its seller profile and products.",
        responses={200: StorefrontSerializer, 401: 'Unauthorized', 404: 'Not Found'}
    )
    def get(self, request, seller_id):
        try:
            shop = Shop.objects.select_related('seller').get(pk=seller_id)
        except Shop.DoesNotExist:
            return Response({"error": "Shop not found"}, status=status.HTTP_404_NOT_FOUND)
        serializer = StorefrontSerializer({
            'shop': shop,
            'seller': shop.seller,
            'products': shop.products.all(),
        })
        return Response(serializer.data)


class MyShopView(APIView):
    permission_classes = [IsAuthenticated, IsSeller]

    @swagger_auto_schema(
        operation_description="The seller's own shop profile.",
        responses={200: ShopSerializer, 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request):
        try:
            shop = Shop.objects.get(pk=request.user.pk)
        except Shop.DoesNotExist:
            return Response({"error": "You have not set up a shop yet"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ShopSerializer(shop).data)

    @swagger_auto_schema(
        operation_description="Create the shop profile, or merge changes into the existing one.",
        request_body=ShopSerializer,
        responses={200: ShopSerializer, 201: ShopSerializer, 400: 'Bad Request', 403: 'Forbidden'}
    )
    def put(self, request):
        shop = Shop.objects.filter(pk=request.user.pk).first()
        if shop:
            serializer = ShopSerializer(shop, data=request.data, partial=True)
        else:
            serializer = ShopSerializer(data=request.data)
        if serializer.is_valid():
            saved = serializer.save(seller=request.user)
            logger.info(f"Seller {request.user.id} saved shop '{saved.name}'")
            return Response(serializer.data, status=status.HTTP_200_OK if shop else status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class MyProductsView(APIView):
    permission_classes = [IsAuthenticated, IsSeller]

    @swagger_auto_schema(
        operation_description="The seller's products, newest first.",
        responses={200: ProductSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        products = Product.objects.filter(seller=request.user)
        return Response(ProductSerializer(products, many=True).data)

    @swagger_auto_schema(
        operation_description="Add a product to the seller's shop.",
        request_body=ProductSerializer,
        responses={201: ProductSerializer, 400: 'Bad Request', 403: 'Forbidden'}
    )
    def post(self, request):
        shop = Shop.objects.filter(pk=request.user.pk).first()
        if not shop:
            return Response({"error": "Please save your shop profile first."}, status=status.HTTP_400_BAD_REQUEST)
        serializer = ProductSerializer(data=request.data)
        if serializer.is_valid():
            product = serializer.save(shop=shop, seller=request.user)
            logger.info(f"Seller {request.user.id} added product {product.id}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class ProductDetailView(APIView):
    permission_classes = [IsAuthenticated, IsSeller]

    def get_object(self, request, pk):
        return Product.objects.get(pk=pk, seller=request.user)

    @swagger_auto_schema(request_body=ProductSerializer, responses={200: ProductSerializer, 400: 'Bad Request', 404: 'Not Found'})
    def put(self, request, pk):
        return self.update(request, pk, partial=False)

    @swagger_auto_schema(request_body=ProductSerializer, responses={200: ProductSerializer, 400: 'Bad Request', 404: 'Not Found'})
    def patch(self, request, pk):
        return self.update(request, pk, partial=True)

    def update(self, request, pk, partial):
        try:
            product = self.get_object(request, pk)
        except Product.DoesNotExist:
            return Response({"error": "Product not found or not authorized"}, status=status.HTTP_404_NOT_FOUND)
        serializer = ProductSerializer(product, data=request.data, partial=partial)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @swagger_auto_schema(responses={204: 'No Content', 404: 'Not Found'})
    def delete(self, request, pk):
        try:
            product = self.get_object(request, pk)
        except Product.DoesNotExist:
            return Response({"error": "Product not found or not authorized"}, status=status.HTTP_404_NOT_FOUND)
        product.delete()
        logger.info(f"Seller {request.user.id} removed product {pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)
