import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from bee_here.api import ApiError, AttendanceApiClient
from bee_here.coordinator import LOGIN, InMemoryTokenStore, SessionCoordinator, ViewNavigator
from bee_here.screen import CodeEntryScreen
from bee_here.workflow import AttendanceWorkflow


def build_app(seen):
    async def student(request):
        seen.append(("student", dict(request.query), request.headers.get("Authorization")))
        return web.json_response([{"id": 1, "name": "Ann", "user": 5}])

    async def session(request):
        seen.append(("session", dict(request.query), request.headers.get("Authorization")))
        if request.query.get("class_code") == "ABC 1&x":
            return web.json_response([{"id": 42}])
        return web.json_response([])

    async def attendance(request):
        body = await request.json()
        seen.append(("attendance", body, request.headers.get("Content-Type")))
        if body == {"session": 42, "student": 1}:
            return web.json_response({"non_field_errors": ["unique together"]}, status=400)
        return web.json_response({"id": 9, **body}, status=201)

    async def broken(request):
        return web.Response(text="<html>gateway</html>", status=502)

    app = web.Application()
    app.router.add_get("/api/student", student)
    app.router.add_get("/api/session", session)
    app.router.add_post("/api/attendance", attendance)
    app.router.add_get("/api/broken", broken)
    return app


def run_against_server(scenario):
    seen = []

    async def runner():
        server = TestServer(build_app(seen))
        await server.start_server()
        try:
            async with AttendanceApiClient(str(server.make_url("/api")), InMemoryTokenStore("abc.def")) as client:
                return await scenario(client)
        finally:
            await server.close()

    return asyncio.run(runner()), seen


def test_fetch_current_student_sends_jwt_header():
    response, seen = run_against_server(lambda client: client.fetch_current_student())

    assert response.status == 200
    assert response.payload[0]["name"] == "Ann"
    assert seen == [("student", {"is_user": "True"}, "JWT abc.def")]


def test_find_sessions_encodes_the_code():
    response, seen = run_against_server(lambda client: client.find_sessions("ABC 1&x"))

    assert response.payload == [{"id": 42}]
    assert seen[0][1] == {"class_code": "ABC 1&x"}


def test_post_attendance_sends_json_body():
    async def scenario(client):
        first = await client.post_attendance(42, 1)
        second = await client.post_attendance(7, 1)
        return first, second

    (first, second), seen = run_against_server(scenario)

    assert first.status == 400
    assert first.payload == {"non_field_errors": ["unique together"]}
    assert second.status == 201
    assert seen[0] == ("attendance", {"session": 42, "student": 1}, "application/json")


def test_non_json_body_raises_api_error():
    with pytest.raises(ApiError, match="non-JSON"):
        run_against_server(lambda client: client._request("GET", "broken"))


def test_unreachable_service_raises_api_error():
    async def scenario():
        server = TestServer(web.Application())
        await server.start_server()
        url = str(server.make_url("/api/"))
        await server.close()
        async with AttendanceApiClient(url, InMemoryTokenStore("abc.def"), timeout=5) as client:
            await client.fetch_current_student()

    with pytest.raises(ApiError):
        asyncio.run(scenario())


def test_headers_match_service_contract():
    client = AttendanceApiClient("https://example.test/api", InMemoryTokenStore("tok"))

    assert client.headers == {"Content-Type": "application/json", "Authorization": "JWT tok"}


def test_sign_out_clears_token_for_later_requests():
    seen = []
    responses = [
        web.json_response({"detail": "Signature has expired."}, status=401),
        web.json_response([{"id": 1, "name": "Ann"}]),
    ]

    async def student(request):
        seen.append(request.headers.get("Authorization"))
        return responses.pop(0)

    app = web.Application()
    app.router.add_get("/api/student", student)
    tokens = InMemoryTokenStore("secret")
    navigator = ViewNavigator()

    async def scenario():
        server = TestServer(app)
        await server.start_server()
        try:
            async with AttendanceApiClient(str(server.make_url("/api/")), tokens) as client:
                coordinator = SessionCoordinator(tokens, navigator)
                screen = CodeEntryScreen(AttendanceWorkflow(client), coordinator)
                first = await screen.mount()
                await screen.mount()
                return first
        finally:
            await server.close()

    first = asyncio.run(scenario())

    assert first.sign_out
    assert navigator.current == LOGIN
    assert seen[0] == "JWT secret"
    assert len(seen) == 2 and "secret" not in seen[1]


def test_slow_service_raises_api_error():
    async def slow(request):
        await asyncio.sleep(1)
        return web.json_response([])

    app = web.Application()
    app.router.add_get("/api/student", slow)

    async def scenario():
        server = TestServer(app)
        await server.start_server()
        try:
            async with AttendanceApiClient(
                str(server.make_url("/api/")), InMemoryTokenStore("abc.def"), timeout=0.1
            ) as client:
                await client.fetch_current_student()
        finally:
            await server.close()

    with pytest.raises(ApiError, match="timed out"):
        asyncio.run(scenario())
