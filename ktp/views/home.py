from django.shortcuts import redirect, render
from django.views.decorators.http import require_GET


@require_GET
def home(request):
    """Landing page; logged-in users go straight to their dashboard."""
    if request.actor is not None:
        return redirect(request.actor.home_url)
    return render(request, "ktp/home.html")
