from fastapi import APIRouter, Depends, FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from app.api.handlers.demo import DemoHandler
from app.api.middleware import only_v1_middleware


def register_routes(app: FastAPI, handler: DemoHandler) -> None:
    app.add_api_route("/", handler.root, methods=["GET"])
    app.add_api_route("/hello", handler.hello, methods=["GET"])
    app.add_api_route("/request", handler.request_info, methods=["GET"])
    app.add_api_route("/user/{userId}/order/{orderId}", handler.route_parameters, methods=["GET"])
    app.add_api_route("/hello-form", handler.request_form, methods=["GET"])
    app.add_api_route("/upload-file", handler.upload_file, methods=["POST"])
    app.add_api_route("/login", handler.login, methods=["POST"])
    app.add_api_route("/register", handler.register, methods=["POST"])
    app.add_api_route("/response-json", handler.response_json, methods=["GET"])
    app.add_api_route("/download", handler.download_file, methods=["GET"])
    app.add_api_route("/download/{filename}", handler.download_uploaded, methods=["GET"])

    v1 = APIRouter(prefix="/v1", tags=["v1"], dependencies=[Depends(only_v1_middleware)])
    v1.add_api_route("/test", handler.routing_group, methods=["GET"])
    v1.add_api_route("/view", handler.render_view, methods=["GET"], response_class=HTMLResponse)

    hello = APIRouter(prefix="/hello", tags=["hello"])
    hello.add_api_route("/test", handler.routing_group, methods=["GET"])

    app.include_router(v1)
    app.include_router(hello)

    app.mount(
        "/public",
        StaticFiles(directory=handler.settings.public_dir, check_dir=False),
        name="public",
    )
