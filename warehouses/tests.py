from django.test import TestCase
from django.urls import reverse

from users.models import Employee
from .models import Warehouse
from .services import SELECTION_KEY, build_warehouse_controller


def make_user(username='manager', role=Employee.MANAGER):
    return Employee.objects.create_user(username=username, password='pass12345', role=role)


class WarehouseViewTests(TestCase):
    def setUp(self):
        self.client.force_login(make_user())

    def test_create_list_and_search(self):
        response = self.client.post(reverse('warehouses:create_warehouse'), {
            'name': 'apple', 'city': 'Kampala', 'phone': '0700000000',
            'email': 'apple@example.com', 'country': 'Uganda',
        })
        self.assertEqual(response.status_code, 302)
        Warehouse.objects.create(name='banana', city='Jinja')

        response = self.client.get(reverse('warehouses:warehouse_list'), {'search': 'kampala'})
        self.assertEqual([warehouse.name for warehouse in response.context['page_obj']], ['apple'])

    def test_invalid_email(self):
        response = self.client.post(reverse('warehouses:create_warehouse'), {'name': 'apple', 'email': 'nope'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('email', response.context['form'].errors)
        self.assertFalse(Warehouse.objects.exists())

    def test_delete_selected(self):
        first = Warehouse.objects.create(name='apple')
        second = Warehouse.objects.create(name='banana')
        session = self.client.session
        session[SELECTION_KEY] = [first.pk, second.pk + 100]
        session.save()

        self.client.post(reverse('warehouses:delete_selected_warehouses'))

        self.assertEqual(list(Warehouse.objects.all()), [second])

    def test_toggle_and_clear_selection(self):
        warehouse = Warehouse.objects.create(name='apple')
        self.client.post(reverse('warehouses:toggle_warehouse', args=[warehouse.pk]) + '?search=app')
        self.assertEqual(self.client.session[SELECTION_KEY], [warehouse.pk])

        response = self.client.post(reverse('warehouses:clear_warehouse_selection') + '?search=app')
        self.assertRedirects(response, reverse('warehouses:warehouse_list') + '?search=app', fetch_redirect_response=False)
        self.assertEqual(self.client.session[SELECTION_KEY], [])

    def test_validate_field_on_edit(self):
        warehouse = Warehouse.objects.create(name='apple')
        url = reverse('warehouses:validate_warehouse_field', args=['email'])
        response = self.client.post(url, {'pk': warehouse.pk, 'email': 'nope'})
        self.assertFalse(response.json()['valid'])
        response = self.client.post(url, {'pk': 'abc', 'email': 'a@example.com'})
        self.assertEqual(response.status_code, 404)

    def test_update_rerenders_with_errors(self):
        warehouse = Warehouse.objects.create(name='apple')
        response = self.client.post(reverse('warehouses:update_warehouse', args=[warehouse.pk]), {'name': ''})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['warehouse'], warehouse)
        self.assertIn('name', response.context['form'].errors)

    def test_sales_cannot_delete(self):
        warehouse = Warehouse.objects.create(name='apple')
        self.client.force_login(make_user('sam', Employee.SALES))
        response = self.client.post(reverse('warehouses:delete_warehouse', args=[warehouse.pk]))
        self.assertEqual(response.status_code, 403)
        self.assertTrue(Warehouse.objects.filter(pk=warehouse.pk).exists())

    def test_export(self):
        Warehouse.objects.create(name='apple')
        response = self.client.get(reverse('warehouses:export_warehouses', args=['pdf']))
        self.assertTrue(response.content.startswith(b'%PDF'))


class WarehouseControllerTests(TestCase):
    def test_default_sort_is_newest_first(self):
        older = Warehouse.objects.create(name='apple')
        newer = Warehouse.objects.create(name='banana')
        controller = build_warehouse_controller(make_user())
        self.assertEqual(list(controller.page()), [newer, older])

    def test_has_no_import(self):
        controller = build_warehouse_controller(make_user())
        self.assertFalse(controller.can('import'))
