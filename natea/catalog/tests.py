"""
Test suite for the catalog module
Tests: product CRUD, validation, filters, images and options
"""
import shutil
import tempfile
from io import BytesIO

from PIL import Image
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from natea.core.models import AuditLog
from natea.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Product

MEDIA_ROOT = tempfile.mkdtemp()


def make_image(name='teh.png'):
    buffer = BytesIO()
    Image.new('RGB', (10, 10), color=(46, 125, 50)).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class ProductTests(TestCase):
    """Test product endpoints"""

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_is_public_and_newest_first(self):
        older = TestDataFactory.create_product(name='Es Teh')
        newer = TestDataFactory.create_product(name='Es Jeruk')
        self.client.logout()
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in response.data], [newer.id, older.id])

    def test_create_product(self):
        data = {'name': '  Teh Tarik  ', 'category': 'Minuman', 'size': 'Large', 'sale_price': 15000, 'hpp': 6000}
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Teh Tarik')
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Product').exists())

    def test_create_with_image(self):
        data = {'name': 'Matcha', 'category': 'Minuman', 'size': 'Small', 'sale_price': 18000, 'image': make_image()}
        response = self.client.post('/api/v1/products/', data, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('products/', response.data['image'])
        self.assertEqual(Product.objects.get().hpp, 0)

    def test_create_validation(self):
        base = {'name': 'Teh', 'category': 'Minuman', 'size': 'Small', 'sale_price': 15000}
        for field, value in [('name', '   '), ('sale_price', 0), ('size', 'Jumbo'), ('hpp', -1)]:
            data = dict(base, **{field: value})
            response = self.client.post('/api/v1/products/', data, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, field)
            self.assertIn(field, response.data)

    def test_create_requires_authentication(self):
        self.client.logout()
        data = {'name': 'Teh', 'category': 'Minuman', 'size': 'Small', 'sale_price': 15000}
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_product(self):
        product = TestDataFactory.create_product(sale_price=10000)
        response = self.client.patch(f'/api/v1/products/{product.id}/', {'sale_price': 12000}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sale_price'], 12000)

    def test_update_missing_product(self):
        response = self.client.patch('/api/v1/products/9999/', {'sale_price': 12000}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_product(self):
        product = TestDataFactory.create_product()
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.id).exists())

    def test_filters(self):
        TestDataFactory.create_product(name='Teh Tarik', category='Minuman', size='Large')
        TestDataFactory.create_product(name='Roti Bakar', category='Makanan', size='Medium')

        response = self.client.get('/api/v1/products/?search=teh')
        self.assertEqual([p['name'] for p in response.data], ['Teh Tarik'])

        response = self.client.get('/api/v1/products/?category=Makanan')
        self.assertEqual([p['name'] for p in response.data], ['Roti Bakar'])

        response = self.client.get('/api/v1/products/?size=Tiny')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_options(self):
        response = self.client.get('/api/v1/products/options/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sizes'], ['Small', 'Medium', 'Large', 'Extra Large'])
