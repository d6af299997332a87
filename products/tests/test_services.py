import io
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings
from openpyxl import load_workbook

from products.models import Product
from products.services import lists_for_fields, product_exporter, reference_resolver
from utils.exporters import Column
from utils.notifications import LOG, Notifier
from warehouses.models import Warehouse
from .factories import make_brand, make_category, make_product


class ReferenceResolverTests(TestCase):
    def test_resolves_ids_and_names(self):
        category = make_category('Furniture')
        resolve = reference_resolver(type(category))
        self.assertEqual(resolve(category.pk), category.pk)
        self.assertEqual(resolve(str(category.pk)), category.pk)
        self.assertEqual(resolve(' furniture '), category.pk)
        self.assertEqual(resolve('Garden'), 'Garden')
        self.assertIsNone(resolve(''))

    def test_fractional_and_boolean_cells_are_not_ids(self):
        category = make_category('Furniture')
        resolve = reference_resolver(type(category))
        self.assertEqual(resolve(float(category.pk)), category.pk)
        self.assertEqual(resolve(category.pk + 0.9), str(category.pk + 0.9))
        self.assertEqual(resolve(True), 'True')

    def test_lists_for_fields(self):
        category = make_category('Furniture')
        brand = make_brand('Mayondo')
        warehouse = Warehouse.objects.create(name='Main', city='Kampala', phone='0700', email='main@example.com')
        lists = lists_for_fields()
        self.assertEqual(lists['categories'], {category.pk: 'Furniture'})
        self.assertEqual(lists['brands'], {brand.pk: 'Mayondo'})
        self.assertEqual(lists['warehouses'], {warehouse.pk: 'Main'})


class ExporterTests(TestCase):
    def test_column_follows_relations(self):
        product = make_product('apple', brand=None)
        self.assertEqual(Column('Brand', 'brand.name').value(product), '')
        self.assertEqual(Column('Category', 'category.name').value(product), 'Furniture')

    def test_spreadsheet_lists_records(self):
        make_product('apple')
        make_product('banana')
        sheet = load_workbook(io.BytesIO(product_exporter.to_spreadsheet(Product.objects.all()))).active
        values = {cell for row in sheet.iter_rows(values_only=True) for cell in row}
        self.assertTrue({'Products', 'Code', 'apple', 'banana', '5 pcs'} <= values)

    def test_pdf_without_records(self):
        self.assertTrue(product_exporter.to_pdf([]).startswith(b'%PDF'))


@override_settings(NOTIFICATION_EMAIL='stock@example.com')
class NotifierTests(TestCase):
    def setUp(self):
        self.product = make_product('apple', quantity=2)

    def test_mail(self):
        self.assertTrue(Notifier().notify(self.product))
        self.assertEqual(mail.outbox[0].to, ['stock@example.com'])
        self.assertIn('at or below the alert level', mail.outbox[0].body)

    def test_log_channel(self):
        with self.assertLogs('utils.notifications', level='INFO'):
            self.assertTrue(Notifier().notify(self.product, LOG))
        self.assertEqual(mail.outbox, [])

    def test_unknown_channel(self):
        self.assertFalse(Notifier().notify(self.product, 'sms'))

    def test_failure_is_swallowed(self):
        with mock.patch('utils.notifications.send_mail', side_effect=ConnectionRefusedError('down')):
            with self.assertLogs('utils.notifications', level='ERROR'):
                self.assertFalse(Notifier(['ops@example.com']).notify(self.product))

    def test_failing_message_text_is_swallowed(self):
        with mock.patch.object(Product, 'notification_text', side_effect=Product.DoesNotExist('gone')):
            with self.assertLogs('utils.notifications', level='ERROR'):
                self.assertFalse(Notifier().notify(self.product))
        self.assertEqual(mail.outbox, [])
