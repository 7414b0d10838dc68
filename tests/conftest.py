import pytest

from hubgen.core.engine import Engine, setup_default_pipeline
from hubgen.discovery.loader import load_document_from_string

# End-to-end A: a separated chat contract with one method per side
CHAT_HUB_YAML = """
declarations:
  - name: IChatHubServerToClient
    methods:
      - name: UserJoined
        params: [{name: user, type: str}]
  - name: IChatHubClientToServer
    methods:
      - name: SendMessage
        params: [{name: message, type: str}]
  - name: IChatHubContract
    markers:
      hub_client:
        uri: /chat
        name: ChatHubClient
        push: IChatHubServerToClient
        invoke: IChatHubClientToServer
fakes: [ChatHubClient]
"""

# End-to-end B: same contract with Ping() declared on the bridge
BRIDGE_METHOD_YAML = """
declarations:
  - name: IChatHubServerToClient
    methods:
      - name: UserJoined
        params: [{name: user, type: str}]
  - name: IChatHubClientToServer
    methods:
      - name: SendMessage
        params: [{name: message, type: str}]
  - name: IChatHubContract
    methods:
      - name: Ping
    markers:
      hub_client:
        uri: /chat
        name: ChatHubClient
        push: IChatHubServerToClient
        invoke: IChatHubClientToServer
"""


@pytest.fixture
def engine():
    """A fresh engine with the default pipeline and an empty cache."""
    eng = Engine()
    setup_default_pipeline(eng)
    return eng


@pytest.fixture
def chat_document():
    return load_document_from_string(CHAT_HUB_YAML)


@pytest.fixture
def bridge_method_document():
    return load_document_from_string(BRIDGE_METHOD_YAML)


class FakeConnection:
    """In-memory HubConnection: records invokes, exposes registered handlers."""

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.handlers = {}
        self.invocations = []
        self.started = False

    async def start(self):
        self.started = True

    async def stop(self):
        self.started = False

    async def invoke(self, method, args, cancellation=None):
        self.invocations.append((method, tuple(args), cancellation))
        return self.results.get(method)

    def on(self, method, handler):
        self.handlers[method] = handler


class RecordingServices:
    """In-memory ServiceCollection."""

    def __init__(self):
        self.registrations = {}

    def register(self, service_type, factory, lifetime):
        self.registrations[service_type] = (factory, lifetime)

    def resolve(self, service_type):
        factory, _ = self.registrations[service_type]
        return factory()


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def services():
    return RecordingServices()


@pytest.fixture
def connection_factory():
    """A ConnectionFactory that remembers every spec and connection it built."""
    built = []

    def factory(spec):
        conn = FakeConnection()
        built.append((spec, conn))
        return conn

    factory.built = built
    return factory


@pytest.fixture
def chat_file(tmp_path):
    """The chat document written to disk."""
    path = tmp_path / "chat.yaml"
    path.write_text(CHAT_HUB_YAML)
    return path


@pytest.fixture
def bridge_method_file(tmp_path):
    path = tmp_path / "bridge.yaml"
    path.write_text(BRIDGE_METHOD_YAML)
    return path
