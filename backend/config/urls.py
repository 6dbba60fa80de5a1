from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

# Page views are not listed here: they are reached through the menu
# dispatcher, which must stay last because its catch-all pattern matches
# every remaining path.
urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("accounts.urls")),
    path("influencers/", include("influencers.urls")),
    path("contact-records/", include("contacts.urls")),
    path("cooperation-records/", include("cooperation.urls")),
    path("", include("menus.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
