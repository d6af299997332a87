from django.urls import path, re_path
from . import views

app_name = 'warehouses'

urlpatterns = [
    path('', views.warehouse_list, name='warehouse_list'),
    path('create/', views.create_warehouse, name='create_warehouse'),
    path('<int:pk>/update/', views.update_warehouse, name='update_warehouse'),
    path('<int:pk>/delete/', views.delete_warehouse, name='delete_warehouse'),
    path('<int:pk>/select/', views.toggle_warehouse, name='toggle_warehouse'),
    path('selection/delete/', views.delete_selected_warehouses, name='delete_selected_warehouses'),
    path('selection/clear/', views.clear_warehouse_selection, name='clear_warehouse_selection'),
    path('validate/<str:field>/', views.validate_warehouse_field, name='validate_warehouse_field'),
    re_path(r'^export/(?P<fmt>xlsx|pdf)/$', views.export_warehouses, name='export_warehouses'),
]
