from django.http import JsonResponse
from django.utils import timezone


def health(request):
    return JsonResponse(
        {"status": "OK", "timestamp": timezone.now().isoformat()}
    )


def api_not_found(request, *args, **kwargs):
    """
    Catch-all for unknown paths under /api/.

    Answers with JSON instead of Django's HTML 404 page so the client can
    read the error the same way as every other API response.
    """
    return JsonResponse({"error": "API endpoint not found"}, status=404)
