"""
In-memory stand-in for the supply-chain REST backend, served to the
BackendClient through httpx.MockTransport.
"""
import json
import re
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from pydantic import BaseModel

from pcf_portal.utils.constants import ReferenceKindEnum, SharingStatus

API_PREFIX = "/api"
NOT_FOUND = {"detail": "Not found."}


@dataclass
class RecordedRequest:
    method: str
    path: str
    params: dict
    body: Any
    headers: httpx.Headers


def dump(model: BaseModel | dict) -> dict:
    if isinstance(model, BaseModel):
        return model.model_dump(mode="json")
    return dict(model)


class FakeBackend:
    """
    Minimal backend holding companies, products, BOMs, emission records,
    reference catalogs, sharing requests and audit logs in dicts.

    Failures can be injected per method and path with ``fail``.
    """

    def __init__(self):
        self.companies: dict[int, dict] = {}
        self.my_company_ids: list[int] = []
        self.products: dict[tuple[int, int], dict] = {}
        self.line_items: dict[tuple[int, int], list[dict]] = {}
        self.emissions: dict[str, dict[tuple[int, int], list[dict]]] = {
            "transport": {},
            "production_energy": {},
            "user_energy": {},
        }
        self.references: dict[str, list[dict]] = {kind.value: [] for kind in ReferenceKindEnum}
        self.emission_traces: dict[tuple[int, int], dict] = {}
        self.sharing_requests: dict[int, list[dict]] = {}
        self.audit_logs: dict[int, list[dict]] = {}
        self.product_audit_logs: dict[tuple[int, int], list[dict]] = {}
        self.options_schema: dict | None = None
        self.embed_reference_details = True
        self.failures: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[RecordedRequest] = []
        self._next_id = 1000
        self._routes = [
            ("GET", r"/companies/my/", self.list_my_companies),
            ("GET", r"/companies/", self.list_companies),
            ("GET", r"/companies/(\d+)/", self.get_company),
            ("GET", r"/companies/(\d+)/products/", self.list_products),
            ("GET", r"/companies/(\d+)/products/(\d+)/", self.get_product),
            ("GET", r"/companies/(\d+)/products/(\d+)/emission_traces/", self.get_trace),
            ("POST", r"/companies/(\d+)/products/(\d+)/request_access/", self.request_access),
            ("GET", r"/companies/(\d+)/products/(\d+)/bom/", self.list_line_items),
            ("POST", r"/companies/(\d+)/products/(\d+)/bom/", self.create_line_item),
            ("GET", r"/companies/(\d+)/products/(\d+)/bom/(\d+)/", self.get_line_item),
            ("PUT", r"/companies/(\d+)/products/(\d+)/bom/(\d+)/", self.update_line_item),
            ("PATCH", r"/companies/(\d+)/products/(\d+)/bom/(\d+)/", self.update_line_item),
            ("DELETE", r"/companies/(\d+)/products/(\d+)/bom/(\d+)/", self.delete_line_item),
            ("GET", r"/companies/(\d+)/products/(\d+)/emissions/(\w+)/", self.list_emissions),
            ("POST", r"/companies/(\d+)/products/(\d+)/emissions/(\w+)/", self.create_emission),
            ("OPTIONS", r"/companies/(\d+)/products/(\d+)/emissions/(\w+)/", self.emission_options),
            ("GET", r"/companies/(\d+)/products/(\d+)/emissions/(\w+)/(\d+)/", self.get_emission),
            ("PUT", r"/companies/(\d+)/products/(\d+)/emissions/(\w+)/(\d+)/", self.update_emission),
            ("PATCH", r"/companies/(\d+)/products/(\d+)/emissions/(\w+)/(\d+)/", self.update_emission),
            ("DELETE", r"/companies/(\d+)/products/(\d+)/emissions/(\w+)/(\d+)/", self.delete_emission),
            ("GET", r"/reference/(\w+)/", self.list_references),
            ("GET", r"/reference/(\w+)/(\d+)/", self.get_reference),
            ("GET", r"/companies/(\d+)/product_sharing_requests/", self.list_sharing_requests),
            ("POST", r"/companies/(\d+)/product_sharing_requests/bulk_approve/", self.bulk_approve),
            ("POST", r"/companies/(\d+)/product_sharing_requests/bulk_deny/", self.bulk_deny),
            ("GET", r"/companies/(\d+)/audit/", self.company_audit),
            ("GET", r"/companies/(\d+)/products/(\d+)/audit/", self.product_audit),
        ]

    # ------------------------------------------------------------------
    # Seeding helpers
    # ------------------------------------------------------------------

    def add_company(self, company, mine: bool = False) -> dict:
        data = dump(company)
        self.companies[int(data["id"])] = data
        if mine:
            self.my_company_ids.append(int(data["id"]))
        return data

    def add_product(self, company_id: int, product) -> dict:
        data = dump(product)
        self.products[(company_id, data["id"])] = data
        return data

    def add_line_item(self, company_id: int, product_id: int, line_item) -> dict:
        data = dump(line_item)
        self.line_items.setdefault((company_id, product_id), []).append(data)
        return data

    def add_emission(self, kind: str, company_id: int, product_id: int, record) -> dict:
        data = dump(record)
        self.emissions[kind].setdefault((company_id, product_id), []).append(data)
        return data

    def add_reference(self, kind: str, reference) -> dict:
        data = dump(reference)
        self.references[kind].append(data)
        return data

    def set_line_item_status(self, company_id: int, product_id: int, line_item_id: int, status):
        for item in self.line_items.get((company_id, product_id), []):
            if item["id"] == line_item_id:
                item["product_sharing_request_status"] = SharingStatus(status).value

    def fail(
        self,
        method: str,
        path: str,
        status_code: int = 500,
        payload: Any = None,
        network: bool = False,
    ) -> None:
        """Make every request to ``method path`` fail."""

        def failure(request: httpx.Request) -> httpx.Response:
            if network:
                raise httpx.ConnectError("Connection refused", request=request)
            if payload is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=payload)

        self.failures[(method, path)] = failure

    def requests_to(self, method: str, path: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path == path]

    # ------------------------------------------------------------------
    # Transport entry point
    # ------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix(API_PREFIX)
        body = json.loads(request.content) if request.content else None
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=path,
                params=dict(request.url.params),
                body=body,
                headers=request.headers,
            )
        )

        if "authorization" not in request.headers:
            return httpx.Response(
                401, json={"detail": "Authentication credentials were not provided."}
            )

        failure = self.failures.get((request.method, path))
        if failure is not None:
            return failure(request)

        for method, pattern, view in self._routes:
            if method != request.method:
                continue
            match = re.fullmatch(pattern, path)
            if match:
                args = [int(a) if a.isdigit() else a for a in match.groups()]
                return view(request, body, *args)
        return httpx.Response(404, json=NOT_FOUND)

    def _id(self) -> int:
        self._next_id += 1
        return self._next_id

    @staticmethod
    def _json(data: Any, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, json=data)

    # ------------------------------------------------------------------
    # Companies and products
    # ------------------------------------------------------------------

    @staticmethod
    def _search(items: list[dict], request: httpx.Request) -> list[dict]:
        term = request.url.params.get("search")
        if not term:
            return items
        return [item for item in items if term.lower() in item["name"].lower()]

    def list_my_companies(self, request, body):
        return self._json([self.companies[cid] for cid in self.my_company_ids])

    def list_companies(self, request, body):
        return self._json(self._search(list(self.companies.values()), request))

    def get_company(self, request, body, company_id):
        if company_id not in self.companies:
            return self._json(NOT_FOUND, 404)
        return self._json(self.companies[company_id])

    def list_products(self, request, body, company_id):
        products = [p for (cid, _), p in self.products.items() if cid == company_id]
        return self._json({"count": len(products), "results": self._search(products, request)})

    def get_product(self, request, body, company_id, product_id):
        product = self.products.get((company_id, product_id))
        if product is None:
            return self._json(NOT_FOUND, 404)
        return self._json(product)

    def get_trace(self, request, body, company_id, product_id):
        trace = self.emission_traces.get((company_id, product_id))
        if trace is None:
            return self._json(NOT_FOUND, 404)
        return self._json(trace)

    def request_access(self, request, body, supplier_id, product_id):
        if (supplier_id, product_id) not in self.products:
            return self._json(NOT_FOUND, 404)
        # Status changes only become visible on the BOM later
        return httpx.Response(201)

    # ------------------------------------------------------------------
    # BOM
    # ------------------------------------------------------------------

    def _find_product(self, product_id: int) -> dict | None:
        return next((p for (_, pid), p in self.products.items() if pid == product_id), None)

    def list_line_items(self, request, body, company_id, product_id):
        return self._json(self.line_items.get((company_id, product_id), []))

    def create_line_item(self, request, body, company_id, product_id):
        items = self.line_items.setdefault((company_id, product_id), [])
        product = self._find_product(body["line_item_product_id"])
        if product is None:
            return self._json(
                {"line_item_product_id": ["Invalid pk - object does not exist."]}, 400
            )
        if any(item["line_item_product"]["id"] == product["id"] for item in items):
            return self._json(
                {
                    "type": "validation_error",
                    "errors": [
                        {
                            "code": "unique",
                            "detail": "This product is already in the BOM.",
                            "attr": "non_field_errors",
                        }
                    ],
                },
                400,
            )
        item = {
            "id": self._id(),
            "quantity": body["quantity"],
            "line_item_product": product,
            "parent_product": product_id,
            "product_sharing_request_status": SharingStatus.NOT_REQUESTED.value,
        }
        items.append(item)
        return self._json(item, 201)

    def _line_item(self, company_id, product_id, line_item_id) -> dict | None:
        items = self.line_items.get((company_id, product_id), [])
        return next((item for item in items if item["id"] == line_item_id), None)

    def get_line_item(self, request, body, company_id, product_id, line_item_id):
        item = self._line_item(company_id, product_id, line_item_id)
        if item is None:
            return self._json(NOT_FOUND, 404)
        return self._json(item)

    def update_line_item(self, request, body, company_id, product_id, line_item_id):
        item = self._line_item(company_id, product_id, line_item_id)
        if item is None:
            return self._json(NOT_FOUND, 404)
        if "quantity" in body:
            item["quantity"] = body["quantity"]
        return self._json(item)

    def delete_line_item(self, request, body, company_id, product_id, line_item_id):
        item = self._line_item(company_id, product_id, line_item_id)
        if item is None:
            return self._json(NOT_FOUND, 404)
        self.line_items[(company_id, product_id)].remove(item)
        return httpx.Response(204)

    # ------------------------------------------------------------------
    # Emission records and references
    # ------------------------------------------------------------------

    def _with_details(self, kind: str, record: dict) -> dict:
        result = dict(record)
        reference = next(
            (r for r in self.references.get(kind, []) if r["id"] == record.get("reference")),
            None,
        )
        if self.embed_reference_details and reference is not None:
            result["reference_details"] = reference
        elif not self.embed_reference_details:
            result.pop("reference_details", None)
        return result

    def _save_overrides(self, overrides: list[dict]) -> list[dict]:
        return [{**factor, "id": factor.get("id") or self._id()} for factor in overrides]

    def list_emissions(self, request, body, company_id, product_id, kind):
        records = self.emissions.get(kind, {}).get((company_id, product_id), [])
        return self._json([self._with_details(kind, r) for r in records])

    def create_emission(self, request, body, company_id, product_id, kind):
        record = {
            **body,
            "id": self._id(),
            "override_factors": self._save_overrides(body.get("override_factors", [])),
            "line_items": body.get("line_items", []),
        }
        self.emissions[kind].setdefault((company_id, product_id), []).append(record)
        return self._json(self._with_details(kind, record), 201)

    def emission_options(self, request, body, company_id, product_id, kind):
        return self._json(self.options_schema or {"name": kind, "actions": {}})

    def _emission(self, kind, company_id, product_id, emission_id) -> dict | None:
        records = self.emissions.get(kind, {}).get((company_id, product_id), [])
        return next((r for r in records if r["id"] == emission_id), None)

    def get_emission(self, request, body, company_id, product_id, kind, emission_id):
        record = self._emission(kind, company_id, product_id, emission_id)
        if record is None:
            return self._json(NOT_FOUND, 404)
        return self._json(self._with_details(kind, record))

    def update_emission(self, request, body, company_id, product_id, kind, emission_id):
        record = self._emission(kind, company_id, product_id, emission_id)
        if record is None:
            return self._json(NOT_FOUND, 404)
        record.update(body)
        if "override_factors" in body:
            record["override_factors"] = self._save_overrides(body["override_factors"])
        return self._json(self._with_details(kind, record))

    def delete_emission(self, request, body, company_id, product_id, kind, emission_id):
        record = self._emission(kind, company_id, product_id, emission_id)
        if record is None:
            return self._json(NOT_FOUND, 404)
        self.emissions[kind][(company_id, product_id)].remove(record)
        return httpx.Response(204)

    def list_references(self, request, body, kind):
        return self._json(self.references.get(kind, []))

    def get_reference(self, request, body, kind, reference_id):
        reference = next(
            (r for r in self.references.get(kind, []) if r["id"] == reference_id), None
        )
        if reference is None:
            return self._json(NOT_FOUND, 404)
        return self._json(reference)

    # ------------------------------------------------------------------
    # Sharing requests and audit logs
    # ------------------------------------------------------------------

    def list_sharing_requests(self, request, body, company_id):
        return self._json(self.sharing_requests.get(company_id, []))

    def _decide(self, company_id: int, ids: list[int], status: SharingStatus):
        for sharing_request in self.sharing_requests.get(company_id, []):
            if sharing_request["id"] in ids:
                sharing_request["status"] = status.value
        return self._json({"success": True})

    def bulk_approve(self, request, body, company_id):
        return self._decide(company_id, body["ids"], SharingStatus.ACCEPTED)

    def bulk_deny(self, request, body, company_id):
        return self._decide(company_id, body["ids"], SharingStatus.REJECTED)

    def company_audit(self, request, body, company_id):
        return self._json(self.audit_logs.get(company_id, []))

    def product_audit(self, request, body, company_id, product_id):
        return self._json(self.product_audit_logs.get((company_id, product_id), []))
