from django.urls import path

from partner import views

urlpatterns = [
    path("overview/", views.partner_overview, name="partner_overview"),
    path("gt-accounts/", views.gt_account_list, name="gt_account_list"),
    path("campaigns/", views.partner_campaigns, name="partner_campaigns"),
    path("risk-watch/", views.partner_risk_watch, name="partner_risk_watch"),
]
