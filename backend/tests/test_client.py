from roletrando.client import NAMESPACE, GameClient
from roletrando.protocol import Opcode
from roletrando.ranking import RankingEntry


class RecordingSio:
    """Stands in for socketio.Client and replays canned acknowledgements."""

    def __init__(self, replies=None):
        self.replies = replies or {}
        self.calls = []
        self.emitted = []
        self.connected = False

    def connect(self, url, namespaces=None):
        self.connected = True

    def disconnect(self):
        self.connected = False

    def call(self, event, data, namespace=None, timeout=None):
        assert namespace == NAMESPACE
        self.calls.append(data)
        return self.replies.get(data['opcode'])

    def emit(self, event, data, namespace=None):
        self.emitted.append(data)


def test_requests_carry_opcode_and_payload():
    sio = RecordingSio({int(Opcode.TRY_CHARACTER): 2, int(Opcode.GET_WORD): '-E--'})
    client = GameClient('http://localhost:12345', sio=sio).connect()
    client.set_username('ana')
    assert client.username == 'ana'
    assert client.try_character('e') == 2
    assert client.get_word() == '-E--'
    assert sio.calls == [
        {'opcode': 1, 'payload': 'ana'},
        {'opcode': 8, 'payload': 'E'},
        {'opcode': 3},
    ]


def test_get_top3_parses_reply():
    sio = RecordingSio({int(Opcode.RANKING_TOP3): 'bia-350-ana-200'})
    client = GameClient('http://localhost:12345', sio=sio)
    assert client.get_top3() == [RankingEntry('bia', 350), RankingEntry('ana', 200)]


def test_disconnect_sends_terminate_once():
    sio = RecordingSio()
    with GameClient('http://localhost:12345', sio=sio):
        assert sio.connected
    assert not sio.connected
    assert sio.emitted == [{'opcode': int(Opcode.TERMINATE)}]
