from django.urls import path

from marketplace import views

urlpatterns = [
    path("listings/", views.listing_list, name="listing_list"),
    path(
        "listings/<str:listing_id>/applications/",
        views.listing_applications,
        name="listing_applications",
    ),
    path("applications/<str:application_id>/", views.application_review, name="application_review"),
    path("leaderboard/", views.leaderboard_view, name="leaderboard"),
    path("rewards/", views.reward_list, name="reward_list"),
    path("receipts/", views.receipt_collection, name="receipt_collection"),
    path("wallet/", views.wallet_view, name="wallet"),
    path("wallet/redeem/", views.wallet_redeem, name="wallet_redeem"),
    path("campaigns/", views.campaign_collection, name="campaign_collection"),
    path("campaigns/<str:campaign_id>/toggle/", views.campaign_toggle, name="campaign_toggle"),
    path("campaigns/<str:campaign_id>/status/", views.campaign_status, name="campaign_status"),
    path("real-suppliers/", views.real_supplier_list, name="real_supplier_list"),
    path("real-suppliers/<str:supplier_id>/", views.real_supplier_detail, name="real_supplier_detail"),
    path("transactions/simulate/", views.transaction_simulate, name="transaction_simulate"),
    path("whatsapp/templates/", views.whatsapp_templates, name="whatsapp_templates"),
    path("whatsapp/messages/", views.message_collection, name="message_collection"),
]
