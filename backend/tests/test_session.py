import pytest

from conftest import FixedRoulette, ListSupply
from roletrando.engine import RoundEngine
from roletrando.protocol import Opcode, Query, SetUsername, TryCharacter, decode_request
from roletrando.ranking import InMemoryRankingRepository, RankingStore
from roletrando.session import GameSession, SessionClosed, SessionState


def make_session(*pairs, roulette=100, ranking=None):
    engine = RoundEngine(ListSupply(*(pairs or [('TESTE', 'exam word')])), rng=FixedRoulette(roulette))
    if ranking is None:
        ranking = RankingStore(InMemoryRankingRepository())
    return GameSession(engine, ranking)


def ask(session, opcode, payload=None):
    return session.handle(decode_request(opcode, payload))


def test_username_moves_session_to_playing():
    session = make_session()
    assert session.state is SessionState.AWAITING_NAME
    assert ask(session, Opcode.SET_USERNAME, 'ana') is None
    assert session.username == 'ana'
    assert session.state is SessionState.PLAYING


def test_end_to_end_first_round():
    session = make_session()
    ask(session, Opcode.SET_USERNAME, 'ana')
    assert ask(session, Opcode.GET_WORD) == '----'
    assert ask(session, Opcode.GET_TIP) == ''
    assert ask(session, Opcode.IS_ROULETTE_AVAILABLE) is True
    assert ask(session, Opcode.GET_ROULETTE_VALUE) == 100
    assert ask(session, Opcode.TRY_CHARACTER, 'E') == 2
    assert ask(session, Opcode.GET_CURRENT_SCORE) == 200
    assert ask(session, Opcode.GET_WORD) == '-E--'
    assert ask(session, Opcode.GET_ROUND_NUMBER) == 1
    assert ask(session, Opcode.IS_ROUND_FINISHED) is False
    assert ask(session, Opcode.HAS_NEXT_ROUND) is True
    assert ask(session, Opcode.NEXT_ROUND) is False
    assert ask(session, Opcode.ACCUMULATED_SCORE) == 0


def test_next_round_records_accumulated_score():
    ranking = RankingStore(InMemoryRankingRepository())
    session = make_session(('AB', 'x'), ranking=ranking)
    ask(session, Opcode.SET_USERNAME, 'ana')
    ask(session, Opcode.GET_ROULETTE_VALUE)
    ask(session, Opcode.TRY_CHARACTER, 'A')
    assert ask(session, Opcode.NEXT_ROUND) is True
    assert ranking.highscore_of('ana') == 100
    assert ask(session, Opcode.GET_USER_HIGH_SCORE) == 100

    ask(session, Opcode.GET_ROULETTE_VALUE)
    ask(session, Opcode.TRY_CHARACTER, 'A')
    assert ask(session, Opcode.NEXT_ROUND) is True
    assert ranking.highscore_of('ana') == 200


def test_lower_game_does_not_lower_highscore():
    ranking = RankingStore(InMemoryRankingRepository([('ana', 5000)]))
    ranking.load()
    session = make_session(('AB', 'x'), ranking=ranking)
    ask(session, Opcode.SET_USERNAME, 'ana')
    ask(session, Opcode.GET_ROULETTE_VALUE)
    ask(session, Opcode.TRY_CHARACTER, 'A')
    assert ask(session, Opcode.NEXT_ROUND) is True
    assert ask(session, Opcode.GET_USER_HIGH_SCORE) == 5000


def test_next_round_without_username_skips_ranking():
    ranking = RankingStore(InMemoryRankingRepository())
    session = make_session(('AB', 'x'), ranking=ranking)
    assert session.ranking is ranking
    ask(session, Opcode.GET_ROULETTE_VALUE)
    ask(session, Opcode.TRY_CHARACTER, 'A')
    assert ask(session, Opcode.NEXT_ROUND) is True
    assert ranking.top3() == []
    assert ask(session, Opcode.GET_USER_HIGH_SCORE) == 0


def test_ranking_top3_reply():
    ranking = RankingStore(InMemoryRankingRepository())
    ranking.refresh_if_greater('ana', 200)
    ranking.refresh_if_greater('bia', 350)
    session = make_session(ranking=ranking)
    assert ask(session, Opcode.RANKING_TOP3) == 'bia-350-ana-200'


def test_terminate_closes_session():
    session = make_session()
    assert ask(session, Opcode.TERMINATE) is None
    assert session.state is SessionState.TERMINATED
    with pytest.raises(SessionClosed):
        ask(session, Opcode.GET_WORD)


def test_unknown_request_type_rejected():
    session = make_session()
    with pytest.raises(TypeError):
        session.handle(object())


def test_variants_dispatch_directly():
    session = make_session()
    session.handle(SetUsername('bia'))
    assert session.handle(Query(Opcode.GET_ROULETTE_VALUE)) == 100
    assert session.handle(TryCharacter('T')) == 2
    assert session.handle(Query(Opcode.GET_CURRENT_SCORE)) == 200
