"""Read-only access to the uploads tree at /uploads."""

from flask import Blueprint

from dirban.web.api import file_response, services

uploads = Blueprint("uploads", __name__, url_prefix="/uploads")


@uploads.get("/", defaults={"subpath": ""})
@uploads.get("/<path:subpath>")
def read_upload(subpath):
    return file_response(services().uploads.read(None, subpath))
