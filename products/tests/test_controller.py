import io
from unittest import mock

from django.contrib import messages
from django.core import mail
from django.core.exceptions import ValidationError
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from openpyxl import Workbook, load_workbook

from products.models import Product
from products.services import build_product_controller
from users.models import Employee
from utils.controller import State
from utils.exceptions import AuthorizationError, InvalidTransition, PersistenceError
from utils.listing import SelectionTracker
from .factories import make_category, make_product, make_user, product_data

XLSX = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def workbook_upload(rows, name='products.xlsx'):
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=XLSX)


class ProductControllerCreateTests(TestCase):
    def setUp(self):
        self.manager = make_user()
        self.category = make_category()
        self.storage = InMemoryStorage()
        self.controller = build_product_controller(self.manager, storage=self.storage)
        self.refreshed = []
        self.controller.subscribe(self.refreshed.append)

    def test_create_scenario(self):
        self.controller.selection.toggle(42)
        self.controller.filters.go_to(3)
        self.controller.open_create()
        for field, value in product_data(category=self.category.pk).items():
            self.assertEqual(self.controller.set_field(field, value), [])

        product = self.controller.submit()

        self.assertEqual(Product.objects.filter(name='apple').count(), 1)
        self.assertEqual(Product.objects.count(), 1)
        self.assertEqual(self.controller.selection.selected_ids(), {42})
        self.assertEqual(self.controller.state, State.BROWSING)
        self.assertEqual(self.refreshed, [self.controller])
        page = self.controller.page()
        self.assertEqual(page.number, 1)
        self.assertEqual(page.object_list[0], product)
        self.assertIn((messages.SUCCESS, 'Product created successfully.'), self.controller.alerts)

    def test_open_create_fills_defaults(self):
        self.controller.open_create()
        self.assertEqual(self.controller.state, State.CREATING)
        self.assertEqual(self.controller.draft['unit'], 'pcs')
        self.assertEqual(self.controller.draft['stock_alert'], 10)
        self.assertEqual(self.controller.errors, {})

    def test_set_field_keeps_and_clears_field_errors(self):
        self.controller.open_create()
        self.assertTrue(self.controller.set_field('quantity', 0))
        self.assertIn('quantity', self.controller.errors)
        self.assertEqual(self.controller.set_field('quantity', 3), [])
        self.assertNotIn('quantity', self.controller.errors)

    def test_invalid_draft_never_reaches_the_store(self):
        self.controller.open_create()
        self.controller.fill(product_data(name='', category=self.category.pk))
        with mock.patch.object(self.controller.store, 'insert') as insert:
            with self.assertRaises(ValidationError) as caught:
                self.controller.submit()
        insert.assert_not_called()
        self.assertIn('name', caught.exception.message_dict)
        self.assertEqual(self.controller.state, State.CREATING)
        self.assertTrue(self.controller.form().errors)
        self.assertEqual(self.refreshed, [])

    def test_storage_failure_becomes_an_alert(self):
        self.controller.open_create()
        self.controller.fill(product_data(category=self.category.pk))
        with mock.patch.object(self.controller.store, 'insert', side_effect=PersistenceError('Unable to save product.')):
            self.assertIsNone(self.controller.submit())
        self.assertEqual(self.controller.alerts, [(messages.ERROR, 'Unable to save product.')])
        self.assertEqual(self.controller.state, State.CREATING)
        self.assertEqual(Product.objects.count(), 0)

    def test_image_is_stored_and_attached(self):
        self.controller.open_create()
        self.controller.fill(product_data(name='Oak Table', category=self.category.pk))
        upload = SimpleUploadedFile('photo.PNG', b'png-bytes', content_type='image/png')
        product = self.controller.submit({'image_file': upload})
        self.assertRegex(product.image, r'^oak-table-\d{4}-\d{2}-\d{2}-\d{6}\.png$')
        self.assertTrue(self.storage.exists(f'products/{product.image}'))
        product.refresh_from_db()
        self.assertTrue(product.image.startswith('oak-table-'))

    def test_cancel_drops_the_draft(self):
        self.controller.open_create()
        self.controller.set_field('name', 'pear')
        self.controller.cancel()
        self.assertEqual(self.controller.state, State.BROWSING)
        self.assertIsNone(self.controller.draft)
        self.assertEqual(Product.objects.count(), 0)

    def test_field_changes_need_a_draft(self):
        with self.assertRaises(InvalidTransition):
            self.controller.set_field('name', 'pear')
        with self.assertRaises(InvalidTransition):
            self.controller.submit()

    def test_sales_cannot_create(self):
        controller = build_product_controller(make_user('sam', Employee.SALES))
        with self.assertRaises(AuthorizationError):
            controller.open_create()
        self.assertEqual(controller.state, State.BROWSING)
        self.assertIsNone(controller.draft)


class ProductControllerEditTests(TestCase):
    def setUp(self):
        self.manager = make_user()
        self.product = make_product('apple')

    def test_edit_updates_in_place(self):
        controller = build_product_controller(self.manager)
        controller.open_edit(self.product.pk)
        self.assertEqual(controller.state, State.EDITING)
        self.assertEqual(controller.draft['name'], 'apple')
        controller.set_field('name', 'green apple')
        controller.submit()

        self.product.refresh_from_db()
        self.assertEqual(self.product.name, 'green apple')
        self.assertEqual(Product.objects.count(), 1)
        self.assertEqual(controller.state, State.BROWSING)

    def test_edit_requires_update_permission(self):
        controller = build_product_controller(make_user('sam', Employee.SALES))
        with mock.patch.object(controller.store, 'find') as find:
            with self.assertRaises(AuthorizationError):
                controller.open_edit(self.product.pk)
        find.assert_not_called()
        self.assertEqual(controller.state, State.BROWSING)
        self.assertIsNone(controller.instance)

    def test_open_edit_clears_previous_errors(self):
        controller = build_product_controller(self.manager)
        controller.errors = {'name': ['stale']}
        controller.open_edit(self.product.pk)
        self.assertEqual(controller.errors, {})


class ProductControllerDeleteTests(TestCase):
    def setUp(self):
        self.manager = make_user()
        self.products = [make_product(f'item {n}') for n in range(3)]

    def test_bulk_delete_without_permission_removes_nothing(self):
        ids = [product.pk for product in self.products]
        controller = build_product_controller(
            make_user('ivy', Employee.INVENTORY), selection=SelectionTracker(ids)
        )
        with self.assertRaises(AuthorizationError):
            controller.delete_selected()
        self.assertEqual(Product.objects.count(), 3)
        self.assertEqual(controller.selection.selected_ids(), set(ids))

    def test_bulk_delete_reports_missing_ids(self):
        target = self.products[0].pk
        missing = max(product.pk for product in self.products) + 100
        controller = build_product_controller(self.manager, selection=SelectionTracker([target, missing]))

        result = controller.delete_selected()

        self.assertEqual(result.deleted, {target})
        self.assertEqual(result.missing, {missing})
        self.assertFalse(Product.objects.filter(pk=target).exists())
        self.assertEqual(Product.objects.count(), 2)
        self.assertEqual(controller.selection.count(), 0)

    def test_bulk_delete_is_one_call(self):
        ids = {product.pk for product in self.products[:2]}
        controller = build_product_controller(self.manager, selection=SelectionTracker(ids))
        with mock.patch.object(controller.store, 'delete_many', wraps=controller.store.delete_many) as delete_many:
            controller.delete_selected()
        delete_many.assert_called_once_with(ids)
        self.assertEqual(Product.objects.count(), 1)

    def test_failed_bulk_delete_keeps_records_and_selection(self):
        ids = {product.pk for product in self.products}
        controller = build_product_controller(self.manager, selection=SelectionTracker(ids))
        with mock.patch.object(controller.store, 'delete_many', side_effect=PersistenceError('Unable to delete products.')):
            self.assertIsNone(controller.delete_selected())
        self.assertEqual(Product.objects.count(), 3)
        self.assertEqual(controller.selection.selected_ids(), ids)
        self.assertEqual(controller.alerts, [(messages.ERROR, 'Unable to delete products.')])

    def test_single_delete(self):
        controller = build_product_controller(self.manager)
        controller.delete(self.products[1].pk)
        self.assertFalse(Product.objects.filter(pk=self.products[1].pk).exists())

    def test_single_delete_requires_permission(self):
        controller = build_product_controller(make_user('sam', Employee.SALES))
        with self.assertRaises(AuthorizationError):
            controller.delete(self.products[1].pk)
        self.assertEqual(Product.objects.count(), 3)


class ProductControllerImportTests(TestCase):
    def setUp(self):
        self.manager = make_user()
        self.category = make_category('Furniture')
        self.controller = build_product_controller(self.manager)

    def test_import_creates_products(self):
        upload = workbook_upload([
            ['Name', 'Code', 'Category', 'Quantity', 'Cost', 'Price'],
            ['Chair', 'CH-1', 'furniture', 4, 15, 30],
            ['Table', 'TB-1', self.category.pk, 2, 50, 90],
        ])
        self.controller.open_import()
        self.assertEqual(self.controller.run_import(upload), 2)

        self.assertEqual(self.controller.state, State.BROWSING)
        chair = Product.objects.get(code='CH-1')
        self.assertEqual(chair.category, self.category)
        self.assertEqual(chair.unit, 'pcs')
        self.assertEqual(chair.stock_alert, 10)

    def test_blank_cells_fall_back_to_defaults(self):
        upload = workbook_upload([
            ['name', 'code', 'category', 'quantity', 'cost', 'price', 'unit', 'stock_alert'],
            ['Chair', 'CH-1', 'Furniture', 4, 15, 30, None, ''],
        ])
        self.controller.open_import()
        self.assertEqual(self.controller.run_import(upload), 1)

        chair = Product.objects.get(code='CH-1')
        self.assertEqual(chair.unit, 'pcs')
        self.assertEqual(chair.stock_alert, 10)

    def test_fractional_category_id_is_rejected(self):
        upload = workbook_upload([
            ['name', 'code', 'category', 'quantity', 'cost', 'price'],
            ['Chair', 'CH-1', self.category.pk + 0.9, 4, 15, 30],
        ])
        self.controller.open_import()
        self.assertEqual(self.controller.run_import(upload), 0)
        self.assertEqual(Product.objects.count(), 0)
        self.assertIn('category', self.controller.alerts[0][1])

    def test_failed_row_imports_nothing(self):
        upload = workbook_upload([
            ['name', 'code', 'category', 'quantity', 'cost', 'price'],
            ['Chair', 'CH-1', 'Furniture', 4, 15, 30],
            ['Stool', 'ST-1', 'Unknown', 0, 5, 9],
        ])
        self.controller.open_import()
        self.assertEqual(self.controller.run_import(upload), 0)

        self.assertEqual(Product.objects.count(), 0)
        self.assertEqual(self.controller.state, State.BROWSING)
        level, message = self.controller.alerts[0]
        self.assertEqual(level, messages.ERROR)
        self.assertIn('row 3', message)

    def test_unreadable_file_is_reported(self):
        upload = SimpleUploadedFile('products.xlsx', b'not a workbook', content_type=XLSX)
        self.controller.open_import()
        self.controller.run_import(upload)
        self.assertEqual(self.controller.state, State.BROWSING)
        self.assertEqual(self.controller.alerts[0][0], messages.ERROR)

    def test_missing_or_wrong_file_keeps_importing(self):
        self.controller.open_import()
        with self.assertRaises(ValidationError):
            self.controller.run_import(None)
        self.assertEqual(self.controller.state, State.IMPORTING)
        with self.assertRaises(ValidationError):
            self.controller.run_import(SimpleUploadedFile('products.csv', b'name,code'))
        self.assertIn('import_file', self.controller.errors)

    def test_sales_cannot_import(self):
        controller = build_product_controller(make_user('sam', Employee.SALES))
        with self.assertRaises(AuthorizationError):
            controller.open_import()
        self.assertEqual(controller.state, State.BROWSING)


class ProductControllerSideServiceTests(TestCase):
    def setUp(self):
        self.manager = make_user()
        self.product = make_product('apple', quantity=3)
        self.controller = build_product_controller(self.manager)

    def test_notify_sends_mail(self):
        self.controller.notify(self.product.pk)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('apple', mail.outbox[0].body)
        self.assertEqual(self.controller.alerts[0][0], messages.SUCCESS)

    def test_notification_failure_does_not_raise(self):
        with mock.patch('utils.notifications.send_mail', side_effect=OSError('smtp down')):
            self.controller.notify(self.product.pk)
        self.assertEqual(self.controller.alerts[0][0], messages.WARNING)

    def test_export_spreadsheet(self):
        content = self.controller.export('xlsx')
        sheet = load_workbook(io.BytesIO(content)).active
        values = [cell for row in sheet.iter_rows(values_only=True) for cell in row]
        self.assertIn('apple', values)
        self.assertIn('Code', values)

    def test_export_pdf(self):
        self.assertTrue(self.controller.export('pdf').startswith(b'%PDF'))

    def test_export_unknown_format(self):
        with self.assertRaises(ValueError):
            self.controller.export('csv')
