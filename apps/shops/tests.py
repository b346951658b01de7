from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from apps.shops.models import Shop, Product

User = get_user_model()

PASSWORD = "Str0ngPass!x"


class ShopTestBase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = User.objects.create_user(
            username='seller', email='seller@example.com', password=PASSWORD, name='Seller', account_type='seller'
        )
        self.other_seller = User.objects.create_user(
            username='seller2', email='seller2@example.com', password=PASSWORD, name='Seller Two', account_type='seller'
        )
        self.customer = User.objects.create_user(username='cust', email='cust@example.com', password=PASSWORD, name='Cust')


class MyShopTest(ShopTestBase):
    def test_save_creates_then_merges(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.put('/shops/manage/', {
            'name': 'Tola Tools',
            'description': 'Hand tools',
            'address': '12 Allen Ave',
        }, format='json')
        self.assertEqual(response.status_code, 201)
        created_at = Shop.objects.get(pk=self.seller.pk).created_at

        response = self.client.put('/shops/manage/', {'description': 'Hand and power tools'}, format='json')

        self.assertEqual(response.status_code, 200)
        shop = Shop.objects.get(pk=self.seller.pk)
        self.assertEqual(shop.name, 'Tola Tools')
        self.assertEqual(shop.address, '12 Allen Ave')
        self.assertEqual(shop.description, 'Hand and power tools')
        self.assertEqual(shop.created_at, created_at)

    def test_new_shop_needs_a_name(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.put('/shops/manage/', {'description': 'No name'}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_only_sellers_manage_shops(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.put('/shops/manage/', {'name': 'Nope'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_get_missing_shop(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.get('/shops/manage/')

        self.assertEqual(response.status_code, 404)


class ProductTest(ShopTestBase):
    def setUp(self):
        super().setUp()
        self.shop = Shop.objects.create(seller=self.seller, name='Tola Tools')
        self.other_shop = Shop.objects.create(seller=self.other_seller, name='Other Shop')
        self.foreign_product = Product.objects.create(
            shop=self.other_shop, seller=self.other_seller, name='Saw', price='5000.00'
        )

    def test_product_requires_saved_shop(self):
        Shop.objects.filter(pk=self.seller.pk).delete()
        self.client.force_authenticate(user=self.seller)

        response = self.client.post('/shops/manage/products/', {'name': 'Hammer', 'price': '2500'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Please save your shop profile first.')

    def test_add_and_list_products(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post('/shops/manage/products/', {'name': 'Hammer', 'price': '2500'}, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['shop'], self.seller.pk)

        response = self.client.get('/shops/manage/products/')
        self.assertEqual([p['name'] for p in response.data], ['Hammer'])

    def test_negative_price_rejected(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post('/shops/manage/products/', {'name': 'Hammer', 'price': '-1'}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_update_own_product(self):
        product = Product.objects.create(shop=self.shop, seller=self.seller, name='Hammer', price='2500')
        self.client.force_authenticate(user=self.seller)

        response = self.client.patch(f'/shops/manage/products/{product.id}/', {'price': '2750.50'}, format='json')

        self.assertEqual(response.status_code, 200)
        product.refresh_from_db()
        self.assertEqual(str(product.price), '2750.50')

    def test_cannot_touch_other_sellers_products(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.patch(f'/shops/manage/products/{self.foreign_product.id}/', {'price': '1'}, format='json')
        self.assertEqual(response.status_code, 404)

        response = self.client.delete(f'/shops/manage/products/{self.foreign_product.id}/')
        self.assertEqual(response.status_code, 404)
        self.assertTrue(Product.objects.filter(pk=self.foreign_product.pk).exists())

    def test_delete_own_product(self):
        product = Product.objects.create(shop=self.shop, seller=self.seller, name='Hammer', price='2500')
        self.client.force_authenticate(user=self.seller)

        response = self.client.delete(f'/shops/manage/products/{product.id}/')

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())


class BrowseShopsTest(ShopTestBase):
    def setUp(self):
        super().setUp()
        self.shop = Shop.objects.create(seller=self.seller, name='Tola Tools')
        Product.objects.create(shop=self.shop, seller=self.seller, name='Hammer', price='2500')
        self.client.force_authenticate(user=self.customer)

    def test_list_shops(self):
        response = self.client.get('/shops/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]['name'], 'Tola Tools')
        self.assertEqual(response.data[0]['product_count'], 1)

    def test_storefront(self):
        response = self.client.get(f'/shops/{self.seller.pk}/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['shop']['name'], 'Tola Tools')
        self.assertEqual(response.data['seller']['name'], 'Seller')
        self.assertEqual([p['name'] for p in response.data['products']], ['Hammer'])

    def test_storefront_missing(self):
        response = self.client.get(f'/shops/{self.customer.pk}/')

        self.assertEqual(response.status_code, 404)
