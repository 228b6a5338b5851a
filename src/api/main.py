"""
FastAPI backend: contacts REST API over a JSON-lines file.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from agenda.application import (
    ContactCreated,
    ContactDraft,
    ContactNotFound,
    ContactPatch,
    ContactService,
    Duplicate,
    Invalid,
    StorageError,
)
from agenda.domain import Contact
from agenda.infrastructure import JsonLinesContactStorage

DEFAULT_DATA_FILE = "data/list.txt"

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
)
logger = logging.getLogger(__name__)


def _data_file() -> Path:
    raw = os.environ.get("CONTACTS_DATA_FILE", "").strip()
    return Path(raw or DEFAULT_DATA_FILE)


def _build_service() -> ContactService:
    return ContactService(JsonLinesContactStorage(_data_file()))


def get_service(app: FastAPI) -> ContactService:
    if getattr(app.state, "service", None) is None:
        app.state.service = _build_service()
    return app.state.service


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.service = _build_service()
    logger.info("Contacts stored in %s", _data_file().resolve())
    yield


app = FastAPI(title="Contacts API", lifespan=lifespan)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(
        "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"detail": "Could not save contacts."})


# --- REST: index / health ---


ROUTES = [
    "POST   /contato",
    "GET    /contatos?nome=&id=",
    "GET    /contato/{id}",
    "PUT    /contato",
    "DELETE /contato",
    "DELETE /remove-duplicates",
    "POST   /clear",
]


@app.get("/")
def index():
    return {"message": "Contacts API is running.", "routes": ROUTES}


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: contacts ---


class ContactItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | str
    full_name: str = Field(alias="fullName")
    surname: str
    email: str | None = None
    phone: str | None = None


class CreateContactBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    surname: str | None = None
    email: str | None = None
    phone: str | None = None


class UpdateContactBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | str | None = None
    full_name: str | None = Field(default=None, alias="fullName")
    surname: str | None = None
    email: str | None = None
    phone: str | None = None


class DeleteContactBody(BaseModel):
    id: int | str | None = None


def _contact_json(contact: Contact) -> dict:
    item = ContactItem(
        id=contact.id,
        full_name=contact.full_name,
        surname=contact.surname,
        email=contact.email,
        phone=contact.phone,
    )
    return item.model_dump(by_alias=True, exclude_none=True)


def _raise_rejection(result: Invalid | Duplicate) -> None:
    if isinstance(result, Duplicate):
        raise HTTPException(status_code=409, detail=result.reason)
    raise HTTPException(status_code=400, detail=result.reason)


def _require_id(contact_id: int | str | None, action: str) -> int | str:
    if contact_id is None or str(contact_id).strip() == "":
        raise HTTPException(status_code=400, detail=f"Contact id is required to {action}.")
    return contact_id


@app.post("/contato")
def create_contact(body: CreateContactBody, request: Request):
    service = get_service(request.app)
    draft = ContactDraft(
        id=body.id,
        full_name=body.full_name,
        surname=body.surname,
        email=body.email,
        phone=body.phone,
    )
    result = service.create_contact(draft)
    if isinstance(result, Invalid | Duplicate):
        _raise_rejection(result)
    if not isinstance(result, ContactCreated):
        raise HTTPException(status_code=500, detail="Failed to create contact")
    return JSONResponse(
        content={
            "success": True,
            "message": "Contact saved.",
            "contato": _contact_json(result.contact),
        },
        status_code=201,
    )


@app.get("/contatos")
def list_contacts(
    request: Request,
    nome: str | None = None,
    contact_id: str | None = Query(default=None, alias="id"),
):
    service = get_service(request.app)
    contacts = service.search_contacts(name=nome, contact_id=contact_id)
    return {
        "success": True,
        "total": len(contacts),
        "contatos": [_contact_json(c) for c in contacts],
    }


@app.get("/contato/{contact_id}")
def get_contact(contact_id: str, request: Request):
    service = get_service(request.app)
    contact = service.get_contact(contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found.")
    return {"success": True, "contato": _contact_json(contact)}


@app.put("/contato")
def update_contact(body: UpdateContactBody, request: Request):
    contact_id = _require_id(body.id, "update")
    service = get_service(request.app)
    patch = ContactPatch(
        full_name=body.full_name,
        surname=body.surname,
        email=body.email,
        phone=body.phone,
    )
    result = service.update_contact(contact_id, patch)
    if isinstance(result, ContactNotFound):
        raise HTTPException(status_code=404, detail="Contact not found.")
    if isinstance(result, Invalid | Duplicate):
        _raise_rejection(result)
    return {
        "success": True,
        "message": "Contact updated.",
        "contato": _contact_json(result.contact),
    }


@app.delete("/contato")
def delete_contact(body: DeleteContactBody, request: Request):
    contact_id = _require_id(body.id, "delete")
    service = get_service(request.app)
    result = service.delete_contact(contact_id)
    if isinstance(result, ContactNotFound):
        raise HTTPException(status_code=404, detail="Contact not found.")
    return {"success": True, "message": "Contact removed."}


@app.delete("/remove-duplicates")
def remove_duplicates(request: Request):
    service = get_service(request.app)
    result = service.remove_duplicates()
    return {
        "success": True,
        "message": "Duplicate contacts removed.",
        "removidos": result.removed,
        "totalAntes": result.total_before,
        "totalDepois": result.total_after,
    }


@app.post("/clear")
def clear_contacts(request: Request):
    service = get_service(request.app)
    service.clear_contacts()
    return {"success": True, "message": "Contact list cleared."}
