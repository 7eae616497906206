"""Routes under /api: boards, cards, descriptions, images and the file proxy."""

from flask import Blueprint, Response, current_app, jsonify, request

from dirban.errors import ValidationError
from dirban.files import FileContent
from dirban.images import Upload
from dirban.models import Listing
from dirban.services import Services

api = Blueprint("api", __name__, url_prefix="/api")

ENDPOINTS = [
    "/api/boards",
    "/api/boards/<board>/cards",
    "/api/boards/<board>/cards/<card>/descriptions",
    "/api/boards/<board>/cards/<card>/images",
    "/api/boards/<board>/fs/<path>",
    "/api/uploads/<path>",
]


def services() -> Services:
    return current_app.extensions["dirban"]


def json_body() -> dict:
    """The request's JSON object; {} when there is no body at all."""
    data = request.get_json(force=True, silent=True)
    if data is None:
        if request.get_data():
            raise ValidationError("Malformed JSON body")
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def listing_json(key: str, listing: Listing) -> dict:
    return {
        key: [item.to_dict() for item in listing],
        "skipped": [s.to_dict() for s in listing.skipped],
    }


def file_response(result) -> Response:
    """A directory listing as JSON, or a file's bytes with its content type."""
    if isinstance(result, FileContent):
        response = Response(result.data, mimetype=result.content_type)
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response
    return jsonify({"files": [entry.to_dict() for entry in result]})


@api.get("")
def index():
    return jsonify({"message": "API is running", "endpoints": ENDPOINTS})


# --- Boards ---


@api.get("/boards")
def list_boards():
    listing = services().boards.list_boards()
    return jsonify(
        {
            "boards": [board.config() for board in listing],
            "skipped": [s.to_dict() for s in listing.skipped],
        }
    )


@api.post("/boards")
def create_board():
    data = json_body()
    board = services().boards.create_board(data.get("name"), data.get("repoUrl") or "")
    return jsonify(board.to_dict()), 201


@api.get("/boards/<board_id>")
def get_board(board_id):
    return jsonify(services().boards.get_board(board_id).to_dict())


@api.patch("/boards/<board_id>")
def update_board(board_id):
    data = json_body()
    board = services().boards.update_board(
        board_id,
        name=data.get("name"),
        repo_url=data.get("repoUrl"),
        cards=data.get("cards"),
    )
    return jsonify(board.to_dict())


# --- Cards ---


@api.get("/boards/<board_id>/cards")
def list_cards(board_id):
    return jsonify(listing_json("cards", services().cards.get_cards(board_id)))


@api.post("/boards/<board_id>/cards")
def create_card(board_id):
    folder = services().cards.create_card(board_id, json_body())
    return jsonify(folder.to_dict()), 201


@api.get("/boards/<board_id>/cards/<card_id>")
def get_card(board_id, card_id):
    return jsonify(services().cards.get_card(board_id, card_id).to_dict())


@api.route("/boards/<board_id>/cards/<card_id>", methods=["PATCH", "PUT"])
def update_card(board_id, card_id):
    folder = services().cards.update_card(board_id, card_id, json_body())
    return jsonify(folder.to_dict())


@api.delete("/boards/<board_id>/cards/<card_id>")
def delete_card(board_id, card_id):
    return jsonify({"deleted": services().delete_card(board_id, card_id)})


# --- Descriptions ---


@api.get("/boards/<board_id>/cards/<card_id>/descriptions")
def list_descriptions(board_id, card_id):
    listing = services().descriptions.get_descriptions(board_id, card_id)
    return jsonify(listing_json("descriptions", listing))


@api.post("/boards/<board_id>/cards/<card_id>/descriptions")
def add_description(board_id, card_id):
    data = json_body()
    description = services().descriptions.add_description(
        board_id,
        card_id,
        data.get("content", ""),
        title=data.get("title"),
        tags=data.get("tags"),
    )
    return jsonify(description.to_dict()), 201


@api.put("/boards/<board_id>/cards/<card_id>/descriptions/order")
def reorder_descriptions(board_id, card_id):
    data = json_body()
    listing = services().descriptions.reorder_descriptions(board_id, card_id, data.get("order"))
    return jsonify(listing_json("descriptions", listing))


@api.get("/boards/<board_id>/cards/<card_id>/descriptions/<description_id>")
def get_description(board_id, card_id, description_id):
    description = services().descriptions.get_description(board_id, card_id, description_id)
    return jsonify(description.to_dict())


@api.route("/boards/<board_id>/cards/<card_id>/descriptions/<description_id>", methods=["PATCH", "PUT"])
def update_description(board_id, card_id, description_id):
    data = json_body()
    description = services().descriptions.update_description(
        board_id,
        card_id,
        description_id,
        content=data.get("content"),
        title=data.get("title"),
        tags=data.get("tags"),
    )
    return jsonify(description.to_dict())


@api.delete("/boards/<board_id>/cards/<card_id>/descriptions/<description_id>")
def delete_description(board_id, card_id, description_id):
    deleted = services().descriptions.delete_description(board_id, card_id, description_id)
    return jsonify({"deleted": deleted})


@api.delete("/boards/<board_id>/cards/<card_id>/descriptions/at/<int:index>")
def delete_description_at(board_id, card_id, index):
    description = services().descriptions.delete_description_at(board_id, card_id, index)
    return jsonify({"deleted": description.to_dict()})


# --- Images ---


def _upload(field: str) -> Upload:
    storage = request.files.get(field)
    if storage is None:
        raise ValidationError("Both image and thumbnail are required")
    return Upload(filename=storage.filename or "", content_type=storage.mimetype or "", data=storage.read())


@api.post("/boards/<board_id>/cards/<card_id>/upload-images")
def upload_images(board_id, card_id):
    svc = services()
    svc.cards.get_card(board_id, card_id)
    if len(request.files) > 2:
        raise ValidationError("At most an image and a thumbnail may be uploaded")
    attachment = svc.images.save_images(board_id, card_id, _upload("image"), _upload("thumbnail"))
    return (
        jsonify(
            {
                "message": "Files uploaded successfully",
                "image": attachment.url,
                "thumbnail": attachment.thumbnail,
                "name": attachment.name,
                "size": attachment.size,
            }
        ),
        201,
    )


@api.get("/boards/<board_id>/cards/<card_id>/images")
def list_images(board_id, card_id):
    images = services().images.list_images(board_id, card_id)
    return jsonify({"images": [image.to_dict() for image in images]})


@api.delete("/boards/<board_id>/cards/<card_id>/images/<name>")
def delete_image(board_id, card_id, name):
    return jsonify({"deleted": services().images.delete_image(board_id, card_id, name)})


# --- Generic file proxy inside a board ---


@api.get("/boards/<board_id>/fs", defaults={"subpath": ""})
@api.get("/boards/<board_id>/fs/<path:subpath>")
def read_path(board_id, subpath):
    return file_response(services().files.read(board_id, subpath))


@api.put("/boards/<board_id>/fs/<path:subpath>")
def write_path(board_id, subpath):
    path = services().files.write(board_id, subpath, request.get_data(), is_json=request.is_json)
    return jsonify({"message": "File written", "path": path})


@api.delete("/boards/<board_id>/fs/<path:subpath>")
def delete_path(board_id, subpath):
    return jsonify({"deleted": services().files.delete(board_id, subpath)})


@api.post("/boards/<board_id>/fs/<path:subpath>/mkdir")
def make_directory(board_id, subpath):
    path = services().files.mkdir(board_id, subpath)
    return jsonify({"message": "Directory created", "path": path}), 201


# --- Raw uploads outside the board tree ---


@api.post("/uploads/<path:subpath>")
def upload_file(subpath):
    data = request.get_data()
    path = services().uploads.write(None, subpath, data)
    return jsonify({"message": "File uploaded successfully", "path": f"/uploads/{path}"}), 201


@api.delete("/uploads/<path:subpath>")
def delete_upload(subpath):
    return jsonify({"deleted": services().uploads.delete(None, subpath)})
