from django.core.exceptions import ValidationError
from django.test import TestCase

from products.forms import ProductForm
from products.models import Product
from utils.validation import Ruleset
from .factories import make_brand, make_category, product_data


class ProductRulesetTests(TestCase):
    def setUp(self):
        self.ruleset = Ruleset(ProductForm)
        self.category = make_category()

    def test_valid_product_passes(self):
        form = self.ruleset.validate_all(product_data(category=self.category.pk))
        self.assertEqual(form.cleaned_data['name'], 'apple')
        self.assertEqual(form.cleaned_data['category'], self.category)

    def test_missing_name_names_the_field(self):
        with self.assertRaises(ValidationError) as caught:
            self.ruleset.validate_all(product_data(name=''))
        self.assertIn('name', caught.exception.message_dict)
        self.assertEqual(Product.objects.count(), 0)

    def test_validate_all_reports_every_failing_field(self):
        data = product_data(name='', quantity=0, order_tax=101)
        with self.assertRaises(ValidationError) as caught:
            self.ruleset.validate_all(data)
        self.assertEqual(set(caught.exception.message_dict), {'name', 'quantity', 'order_tax'})

    def test_validate_field_only_reports_that_field(self):
        data = product_data(name='', quantity=0)
        with self.assertRaises(ValidationError) as caught:
            self.ruleset.validate_field(data, 'quantity')
        self.assertEqual(list(caught.exception.message_dict), ['quantity'])

    def test_validate_field_passes_when_other_fields_are_invalid(self):
        self.assertIsNone(self.ruleset.validate_field({'name': 'apple'}, 'name'))

    def test_numeric_bounds(self):
        cases = [
            ('quantity', 0),
            ('stock_alert', -1),
            ('order_tax', -1),
            ('order_tax', 101),
            ('cost', 2147483648),
            ('price', 2147483648),
        ]
        for field, value in cases:
            with self.subTest(field=field, value=value):
                with self.assertRaises(ValidationError):
                    self.ruleset.validate_field(product_data(**{field: value}), field)

    def test_bounds_are_inclusive(self):
        data = product_data(quantity=1, stock_alert=0, order_tax=100, cost=2147483647)
        self.ruleset.validate_all(data)

    def test_type_checks(self):
        with self.assertRaises(ValidationError):
            self.ruleset.validate_field(product_data(quantity='five'), 'quantity')
        with self.assertRaises(ValidationError):
            self.ruleset.validate_field(product_data(price='cheap'), 'price')

    def test_max_lengths(self):
        with self.assertRaises(ValidationError):
            self.ruleset.validate_field(product_data(name='x' * 256), 'name')
        with self.assertRaises(ValidationError):
            self.ruleset.validate_field(product_data(note='x' * 1001), 'note')

    def test_nullable_fields_may_be_empty(self):
        data = product_data(order_tax='', tax_type='', note='', brand='')
        form = self.ruleset.validate_all(data)
        self.assertIsNone(form.cleaned_data['order_tax'])
        self.assertIsNone(form.cleaned_data['brand'])

    def test_references_must_exist(self):
        with self.assertRaises(ValidationError):
            self.ruleset.validate_field(product_data(category=9999), 'category')
        with self.assertRaises(ValidationError):
            self.ruleset.validate_field(product_data(brand=9999), 'brand')
        self.ruleset.validate_field(product_data(brand=make_brand().pk), 'brand')

    def test_unknown_field(self):
        with self.assertRaises(KeyError):
            self.ruleset.validate_field(product_data(), 'colour')
