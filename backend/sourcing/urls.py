from django.urls import path

from sourcing import views

urlpatterns = [
    path("suppliers/", views.supplier_list, name="supplier_list"),
    path("suppliers/search/", views.supplier_search, name="supplier_search"),
    path("suppliers/<str:supplier_id>/", views.supplier_detail, name="supplier_detail"),
    path("suppliers/<str:supplier_id>/contact/", views.supplier_contact, name="supplier_contact"),
    path("sales-orders/<str:so_id>/", views.sales_order_import, name="sales_order_import"),
    path("shortlist/", views.shortlist_collection, name="shortlist_collection"),
    path("shortlist/<str:supplier_id>/", views.shortlist_remove, name="shortlist_remove"),
    path("purchase-orders/", views.purchase_order_collection, name="purchase_order_collection"),
    path("purchase-orders/handoff/", views.purchase_order_handoff, name="purchase_order_handoff"),
    path("purchase-orders/import/", views.purchase_order_import, name="purchase_order_import"),
    path("purchase-orders/<str:po_number>/", views.purchase_order_get, name="purchase_order_get"),
    path(
        "purchase-orders/<str:po_number>/status/",
        views.purchase_order_status,
        name="purchase_order_status",
    ),
    path("demands/", views.demand_list, name="demand_list"),
    path("demands/<str:demand_id>/quotes/", views.demand_quotes, name="demand_quotes"),
]
