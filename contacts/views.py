"""
Server-rendered contact pages.

Every page requires a signed-in user (the fallback policy in
`core.middleware.FallbackAuthenticationMiddleware` redirects anonymous
visitors to the login page). Object pages then ask the authorization handlers
for the operation they perform; a denial renders Django's 403 response.
"""

from __future__ import annotations

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse, reverse_lazy
from django.views.generic import CreateView, DeleteView, DetailView, ListView, UpdateView

from core.authorization import authorize

from . import services
from .authorization import ContactOperations, read_requirements
from .forms import ContactForm
from .models import Contact


class OperationRequiredMixin:
    """Authorize `operation_requirement` on the object returned by `get_object()`."""

    operation_requirement = None

    def get_operation_requirements(self, obj):
        return (self.operation_requirement,) if self.operation_requirement else ()

    def get_object(self, queryset=None):
        obj = super().get_object(queryset)
        services.require_any(self.request, obj, *self.get_operation_requirements(obj))
        return obj


class ContactListView(ListView):
    template_name = "contacts/contact_list.html"
    context_object_name = "contacts"
    paginate_by = 25

    def get_queryset(self):
        return Contact.objects.visible_to(self.request.user).select_related("owner")


class ContactDetailView(OperationRequiredMixin, DetailView):
    """Shows a contact; POST with `action=approve|reject` reviews it."""
    model = Contact
    template_name = "contacts/contact_detail.html"
    context_object_name = "contact"

    def get_operation_requirements(self, obj):
        return read_requirements(obj)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        contact = self.object
        context["can_edit"] = bool(authorize(self.request, contact, ContactOperations.UPDATE))
        context["can_delete"] = bool(authorize(self.request, contact, ContactOperations.DELETE))
        context["can_approve"] = bool(authorize(self.request, contact, ContactOperations.APPROVE))
        context["can_reject"] = bool(authorize(self.request, contact, ContactOperations.REJECT))
        return context

    def post(self, request, *args, **kwargs):
        contact = self.get_object()
        operations = {"approve": ContactOperations.APPROVE, "reject": ContactOperations.REJECT}
        operation = operations.get(request.POST.get("action", ""))
        if operation is None:
            messages.error(request, "Unknown review action.")
        else:
            services.review(request, contact, operation)
            messages.success(request, f"Contact marked {contact.status}.")
        return redirect(reverse("contact-detail", kwargs={"pk": contact.pk}))


class ContactCreateView(CreateView):
    form_class = ContactForm
    template_name = "contacts/contact_form.html"

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        # Owner is needed before model validation runs (OwnedModel.clean).
        kwargs["instance"] = Contact(owner=self.request.user)
        return kwargs

    def form_valid(self, form):
        services.prepare_new_contact(self.request, form.instance)
        return super().form_valid(form)

    def get_success_url(self):
        return reverse("contact-detail", kwargs={"pk": self.object.pk})


class ContactUpdateView(OperationRequiredMixin, UpdateView):
    model = Contact
    form_class = ContactForm
    template_name = "contacts/contact_form.html"
    operation_requirement = ContactOperations.UPDATE

    def form_valid(self, form):
        services.apply_edit_review_rule(self.request, form.instance)
        return super().form_valid(form)

    def get_success_url(self):
        return reverse("contact-detail", kwargs={"pk": self.object.pk})


class ContactDeleteView(OperationRequiredMixin, DeleteView):
    model = Contact
    template_name = "contacts/contact_confirm_delete.html"
    context_object_name = "contact"
    operation_requirement = ContactOperations.DELETE
    success_url = reverse_lazy("contact-list")
