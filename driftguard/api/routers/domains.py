"""
/domains: inspect the domain lists and classify a URL.
Custom lists are changed through the UPDATE_CUSTOM_DOMAINS message.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from ...api.schemas import DomainCheckOut, DomainListsOut
from ...inference.domain_classifier import classify_domain, extract_hostname

router = APIRouter(prefix="/domains", tags=["domains"])


def _get_runtime(request: Request):
    return request.app.state.runtime


@router.get("", response_model=DomainListsOut)
def read_domains(runtime=Depends(_get_runtime)):
    lists = runtime.controller.durable.domains
    return DomainListsOut(
        builtin_productive=sorted(lists.builtin_productive),
        builtin_distraction=sorted(lists.builtin_distraction),
        custom_productive=sorted(lists.custom_productive),
        custom_distraction=sorted(lists.custom_distraction),
    )


@router.get("/classify", response_model=DomainCheckOut)
def classify(url: str = Query(..., description="Page URL to classify"), runtime=Depends(_get_runtime)):
    category = classify_domain(url, runtime.controller.durable.domains)
    return DomainCheckOut(url=url, hostname=extract_hostname(url), category=category.value)
