import logging

from django.contrib import messages
from django.contrib.auth import login, logout
from django.contrib.auth.decorators import login_required
from django.shortcuts import render, redirect
from django.utils.http import url_has_allowed_host_and_scheme

from .forms import StaffAuthenticationForm

logger = logging.getLogger(__name__)


def login_user(request):
    next_url = request.POST.get('next') or request.GET.get('next')
    if request.method == "POST":
        form = StaffAuthenticationForm(request, data=request.POST)
        if form.is_valid():
            user = form.get_user()
            login(request, user)
            logger.info('%s logged in', user.username)
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                return redirect(next_url)
            return redirect('products:product_list')
    else:
        form = StaffAuthenticationForm(request)

    return render(request, 'users/login.html', {
        'form': form,
        'next': next_url,
        'title': 'Login'
    })


@login_required
def logout_user(request):
    logout(request)
    messages.info(request, 'You have been logged out.')
    return redirect('users:login')
