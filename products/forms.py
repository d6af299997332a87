from django import forms
from django.core.validators import FileExtensionValidator
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Submit, Row, Column
from .models import Product, Category, Brand

IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif', 'webp']

# Values a new product starts with
PRODUCT_DEFAULTS = {
    'unit': 'pcs',
    'stock_alert': 10,
    'order_tax': 0,
    'barcode_symbology': 'C128',
}


class ProductForm(forms.ModelForm):
    image_file = forms.FileField(
        required=False,
        label='Image',
        validators=[FileExtensionValidator(IMAGE_EXTENSIONS)],
    )

    class Meta:
        model = Product
        fields = [
            'name', 'code', 'barcode_symbology', 'unit', 'quantity', 'cost', 'price',
            'stock_alert', 'order_tax', 'tax_type', 'note', 'category', 'brand', 'warehouse',
        ]
        widgets = {
            'note': forms.Textarea(attrs={'rows': 3}),
            'quantity': forms.NumberInput(attrs={'min': 1}),
            'stock_alert': forms.NumberInput(attrs={'min': 0}),
            'order_tax': forms.NumberInput(attrs={'min': 0, 'max': 100}),
        }
        help_texts = {
            'stock_alert': 'Alert when stock falls to this level',
            'order_tax': 'Percentage between 0 and 100',
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['category'].queryset = Category.objects.order_by('name')
        self.fields['brand'].queryset = Brand.objects.order_by('name')
        self.fields['brand'].required = False
        self.fields['warehouse'].required = False

        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            Row(
                Column('name', css_class='form-group col-md-6 mb-3'),
                Column('code', css_class='form-group col-md-6 mb-3'),
            ),
            Row(
                Column('category', css_class='form-group col-md-4 mb-3'),
                Column('brand', css_class='form-group col-md-4 mb-3'),
                Column('warehouse', css_class='form-group col-md-4 mb-3'),
            ),
            Row(
                Column('cost', css_class='form-group col-md-6 mb-3'),
                Column('price', css_class='form-group col-md-6 mb-3'),
            ),
            Row(
                Column('quantity', css_class='form-group col-md-4 mb-3'),
                Column('unit', css_class='form-group col-md-4 mb-3'),
                Column('stock_alert', css_class='form-group col-md-4 mb-3'),
            ),
            Row(
                Column('barcode_symbology', css_class='form-group col-md-4 mb-3'),
                Column('order_tax', css_class='form-group col-md-4 mb-3'),
                Column('tax_type', css_class='form-group col-md-4 mb-3'),
            ),
            'note',
            'image_file',
            Submit('submit', 'Save Product', css_class='btn btn-primary mt-3')
        )


class ProductImportForm(forms.Form):
    import_file = forms.FileField(
        label='Spreadsheet',
        validators=[FileExtensionValidator(['xlsx'])],
        help_text='An .xlsx file whose first row names the product fields',
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_method = 'post'
        self.helper.layout = Layout(
            'import_file',
            Submit('submit', 'Import Products', css_class='btn btn-primary mt-3')
        )
