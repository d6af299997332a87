from django.urls import path, re_path
from . import views

app_name = 'products'

urlpatterns = [
    path('', views.product_list, name='product_list'),
    path('create/', views.create_product, name='create_product'),
    path('import/', views.import_products, name='import_products'),
    re_path(r'^export/(?P<fmt>xlsx|pdf)/$', views.export_products, name='export_products'),
    path('<int:pk>/', views.product_detail, name='product_detail'),
    path('<int:pk>/update/', views.update_product, name='update_product'),
    path('<int:pk>/delete/', views.delete_product, name='delete_product'),
    path('<int:pk>/select/', views.toggle_product, name='toggle_product'),
    path('<int:pk>/notify/', views.notify_product, name='notify_product'),
    path('selection/delete/', views.delete_selected_products, name='delete_selected_products'),
    path('selection/clear/', views.clear_product_selection, name='clear_product_selection'),
    path('validate/<str:field>/', views.validate_product_field, name='validate_product_field'),
]
