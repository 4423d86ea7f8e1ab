"""피드 테스트 공용 fixture

외부 협력 서비스(스토리지, 게시물 저장소, 프로필)를 메모리 기반 가짜 객체로 대체합니다.
"""

import asyncio
from dataclasses import replace

import pytest
from flask_jwt_extended import create_access_token

from jobfeed import create_app
from jobfeed.core.errors import PersistenceError
from jobfeed.models.post import Post
from jobfeed.models.user import Profile, SessionContext


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.calls = []
        self.fail_upload = False
        self.fail_resolve = False
        # path -> asyncio.Event, 설정되면 해당 경로 업로드가 이벤트를 기다림
        self.gates = {}

    async def upload(self, path, data, content_type, cache_control, overwrite):
        self.calls.append(("upload", path, cache_control, overwrite))
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        if self.fail_upload:
            raise RuntimeError("storage unavailable")
        if not overwrite and path in self.objects:
            raise FileExistsError(path)
        self.objects[path] = data
        return {"path": path}

    async def get_public_url(self, path):
        self.calls.append(("get_public_url", path))
        if self.fail_resolve:
            raise RuntimeError("cannot resolve")
        return {"url": f"https://storage.test/{path}"}

    def called(self, name):
        return [call for call in self.calls if call[0] == name]


class FakePostService:
    def __init__(self):
        self.posts = {}
        self.created = []
        self.updated = []
        self.fail_create = False
        self.fail_update = False
        self.create_gate = None
        self.update_gate = None

    async def create_post(self, post, refresh_hint):
        self.created.append((post, refresh_hint))
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.fail_create:
            raise PersistenceError()
        saved = replace(post, post_id=f"post-{len(self.posts) + 1}", likes=list(post.likes))
        self.posts[saved.post_id] = saved
        return saved

    async def update_post(self, post, refresh_hint):
        self.updated.append((post, refresh_hint))
        if self.update_gate is not None:
            await self.update_gate.wait()
        if self.fail_update:
            raise PersistenceError()
        saved = replace(post, likes=list(post.likes))
        self.posts[saved.post_id] = saved
        return saved

    async def get_post(self, post_id):
        return self.posts.get(post_id)

    async def list_posts(self):
        return list(reversed(list(self.posts.values())))


class FakeProfileService:
    def __init__(self, profiles=None):
        self.profiles = profiles or {}

    async def resolve_session(self, user_id):
        return SessionContext.from_profile(user_id, self.profiles.get(user_id))


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def post_service():
    return FakePostService()


@pytest.fixture
def profile_service():
    return FakeProfileService({
        "u1": Profile(user_id="u1", candidate_name="Alice"),
        "u2": Profile(user_id="u2", recruiter_name="Bob"),
    })


@pytest.fixture
def alice():
    return SessionContext(user_id="u1", user_name="Alice")


@pytest.fixture
def bob():
    return SessionContext(user_id="u2", user_name="Bob")


@pytest.fixture
def stored_post(post_service):
    post = Post(post_id="p1", author_id="u9", author_name="Carol", message="hiring!", likes=[])
    post_service.posts[post.post_id] = post
    return post


@pytest.fixture
def app(storage, post_service, profile_service):
    return create_app('testing', services={
        'storage': storage,
        'posts': post_service,
        'profiles': profile_service,
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(user_id="u1"):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers


def reaction_ids(likes):
    return [reaction.reactor_user_id for reaction in likes]


