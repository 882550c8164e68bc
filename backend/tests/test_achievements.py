from conftest import LIST_WORDS, perfect, play

from champions import db
from champions.models import Achievement, WordList
from champions.services.achievements import recompute_achievement, star_tier


def _mastery(c):
    res = c.get(f"/api/achievements/user/{c.user['id']}")
    assert res.status_code == 200
    return res.get_json()


def test_star_tier_caps_at_three():
    assert star_tier(0) is None
    assert star_tier(1) == '1 Star'
    assert star_tier(2) == '2 Stars'
    assert star_tier(3) == '3 Stars'
    assert star_tier(7) == '3 Stars'


def test_perfect_game_earns_first_star(alice, word_list):
    session = play(alice, word_list['id'], perfect(LIST_WORDS))
    assert session['starsEarned'] == 1
    [achievement] = _mastery(alice)
    assert achievement['achievementType'] == 'Word List Mastery'
    assert achievement['achievementValue'] == '1 Star'
    assert achievement['completedModes'] == ['standard']

    # Same mode again adds nothing
    again = play(alice, word_list['id'], perfect(LIST_WORDS))
    assert again['starsEarned'] == 0
    assert _mastery(alice)[0]['achievementValue'] == '1 Star'


def test_imperfect_and_practice_games_do_not_count(alice, word_list):
    answers = perfect(LIST_WORDS[:-1]) + [('mango', 'mangoe')]
    assert play(alice, word_list['id'], answers)['starsEarned'] == 0
    assert play(alice, word_list['id'], perfect(LIST_WORDS), game_mode='practice')['starsEarned'] == 0
    assert _mastery(alice) == []


def test_distinct_modes_raise_the_tier_up_to_three(alice, word_list):
    play(alice, word_list['id'], perfect(LIST_WORDS), game_mode='standard')
    play(alice, word_list['id'], perfect(LIST_WORDS[:5]), game_mode='quiz', total_words=5)
    assert _mastery(alice)[0]['achievementValue'] == '2 Stars'
    play(alice, word_list['id'], perfect(LIST_WORDS), game_mode='scramble')
    play(alice, word_list['id'], perfect(LIST_WORDS), game_mode='crossword')
    [achievement] = _mastery(alice)
    assert achievement['achievementValue'] == '3 Stars'
    assert achievement['completedModes'] == ['crossword', 'quiz', 'scramble', 'standard']


def test_timed_game_needs_every_word_on_short_lists(alice, word_list):
    play(alice, word_list['id'], perfect(LIST_WORDS[:4]), game_mode='timed')
    assert _mastery(alice) == []
    play(alice, word_list['id'], perfect(LIST_WORDS), game_mode='timed')
    assert _mastery(alice)[0]['completedModes'] == ['timed']


def test_recompute_is_idempotent(alice, word_list):
    play(alice, word_list['id'], perfect(LIST_WORDS))
    first = alice.post('/api/achievements/recompute', json={'wordListId': word_list['id']}).get_json()
    second = alice.post('/api/achievements/recompute', json={'wordListId': word_list['id']}).get_json()
    assert first == second
    assert first['achievement']['achievementValue'] == '1 Star'
    assert len(_mastery(alice)) == 1


def test_recompute_removes_stale_record(flask_app, alice, word_list):
    with flask_app.app_context():
        db.session.add(Achievement(
            user_id=alice.user['id'], word_list_id=word_list['id'],
            achievement_value='2 Stars', completed_modes=['standard', 'quiz'],
        ))
        db.session.commit()
        assert recompute_achievement(alice.user['id'], db.session.get(WordList, word_list['id'])) is None
        db.session.commit()
        assert Achievement.query.count() == 0


def test_achievements_are_private(alice, bob):
    assert bob.get(f"/api/achievements/user/{alice.user['id']}").status_code == 403


def test_growing_the_list_keeps_earned_modes(alice, word_list):
    play(alice, word_list['id'], perfect(LIST_WORDS), game_mode='timed')
    bigger = LIST_WORDS + ['peach', 'plum', 'kiwi', 'melon', 'lime', 'fig']
    assert alice.put(f"/api/word-lists/{word_list['id']}", json={'words': bigger}).status_code == 200

    play(alice, word_list['id'], perfect(bigger), game_mode='standard')
    [achievement] = _mastery(alice)
    assert achievement['completedModes'] == ['standard', 'timed']
    assert achievement['achievementValue'] == '2 Stars'
