from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render
from django.views.decorators.csrf import csrf_exempt

from shopify_integration.auth import admin_required

from .workflow import add_section as run_add_section


@csrf_exempt
@admin_required
def add_section(request):
    """
    GET renders the admin page; POST (sent by its button) adds the section
    to the store's live theme and reports the outcome as JSON.
    """
    if request.method == "GET":
        return render(request, "sections/add_section.html", {
            "api_key": settings.SHOPIFY_API_KEY,
            "shop": request.shopify_admin.shop,
        })

    if request.method == "POST":
        run = run_add_section(request.shopify_admin)
        return JsonResponse(run.result.to_json(), status=run.result.status_code)

    return JsonResponse({"error": "Invalid HTTP method"}, status=405)
