def _new_game(c, **extra):
    payload = {'name': 'Friday', 'team1_name': 'Owls', 'team2_name': 'Foxes'}
    payload.update(extra)
    res = c.post('/api/games', json=payload)
    assert res.status_code == 201
    return res.get_json()


def _two_player_game(guest, **extra):
    alice, alice_user = guest('Alice')
    bob, bob_user = guest('Bob')
    created = _new_game(alice, **extra)
    res = bob.post(f"/api/games/{created['join_code']}/join", json={'team': 2})
    assert res.status_code == 200
    return created, (alice, alice_user), (bob, bob_user)


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_create_game_requires_login(client):
    res = client.post('/api/games', json={'name': 'x'})
    assert res.status_code == 401
    assert res.get_json()['error'] == 'Not authenticated'


def test_create_and_fetch_by_code(guest):
    alice, alice_user = guest('Alice')
    created = _new_game(alice)
    assert len(created['join_code']) == 6

    state = alice.get(f"/api/games/{created['join_code'].lower()}").get_json()
    assert state['id'] == created['id']
    assert state['status'] == 'waiting'
    assert state['team1_name'] == 'Owls'
    # Creator is seated on team 1 first
    assert [p['user_id'] for p in state['team1_players']] == [alice_user['id']]
    assert state['team1_players'][0]['turn_order'] == 1
    assert state['team2_players'] == []

    by_id = alice.get(f"/api/games/{created['id']}").get_json()
    assert by_id['join_code'] == created['join_code']


def test_create_game_rejects_non_text_names(guest):
    alice, _ = guest('Alice')
    for payload in ({'name': 5}, {'team1_name': ['Owls']}, {'team2_name': {'x': 1}}):
        res = alice.post('/api/games', json=payload)
        assert res.status_code == 400
        assert res.get_json()['code'] == 'invalid_argument'
    assert alice.get('/api/games').get_json() == []


def test_unknown_game_is_404(client):
    res = client.get('/api/games/NOPE99')
    assert res.status_code == 404
    assert res.get_json()['code'] == 'game_not_found'


def test_join_rules(guest):
    created, (alice, _), (bob, _) = _two_player_game(guest)
    res = bob.post(f"/api/games/{created['id']}/join", json={'team': 1})
    assert res.status_code == 409
    assert res.get_json()['code'] == 'already_joined'

    cara, _ = guest('Cara')
    res = cara.post(f"/api/games/{created['id']}/join", json={'team': 3})
    assert res.status_code == 400

    res = cara.post(f"/api/games/{created['id']}/join", json={'team': 2})
    assert res.get_json()['turn_order'] == 2


def test_start_game_rules(guest, catalog):
    alice, _ = guest('Alice')
    bob, _ = guest('Bob')
    created = _new_game(alice)

    # Team 2 is empty
    res = alice.post(f"/api/games/{created['id']}/start")
    assert res.status_code == 409
    assert res.get_json()['code'] == 'no_players_on_team'

    bob.post(f"/api/games/{created['id']}/join", json={'team': 2})
    res = bob.post(f"/api/games/{created['id']}/start")
    assert res.status_code == 403
    assert res.get_json()['code'] == 'not_creator'

    res = alice.post(f"/api/games/{created['id']}/start")
    assert res.status_code == 200
    assert res.get_json()['words'] == len(catalog)

    state = alice.get(f"/api/games/{created['id']}").get_json()
    assert state['status'] == 'playing'
    assert state['current_team'] == 1
    assert state['turn_state'] == 'idle'
    assert state['words_remaining'] == len(catalog)

    res = alice.post(f"/api/games/{created['id']}/start")
    assert res.status_code == 409


def test_start_game_with_empty_catalog(guest):
    created, (alice, _), _ = _two_player_game(guest)
    res = alice.post(f"/api/games/{created['id']}/start")
    assert res.status_code == 409
    assert res.get_json()['code'] == 'catalog_empty'


def test_word_only_visible_to_actor(guest, catalog, client):
    created, (alice, _), (bob, _) = _two_player_game(guest)
    alice.post(f"/api/games/{created['id']}/start")

    res = bob.post(f"/api/games/{created['id']}/start-turn")
    assert res.status_code == 403
    assert res.get_json()['code'] == 'not_your_turn'

    turn = alice.post(f"/api/games/{created['id']}/start-turn").get_json()
    assert turn['word'] in catalog
    assert turn['turn_duration'] == 30

    assert alice.get(f"/api/games/{created['id']}").get_json()['current_word'] == turn['word']
    assert bob.get(f"/api/games/{created['id']}").get_json()['current_word'] is None
    anonymous = client.get(f"/api/games/{created['join_code']}").get_json()
    assert anonymous['current_word'] is None
    assert anonymous['turn_state'] == 'acting'
    assert anonymous['turn_deadline'] == turn['turn_started_at'] + 30


def test_win_scenario(guest, catalog):
    created, (alice, alice_user), (bob, _) = _two_player_game(guest, winning_score=3)
    assert alice.post(f"/api/games/{created['id']}/start").status_code == 200
    assert alice.post(f"/api/games/{created['id']}/start-turn").status_code == 200

    first = alice.post(f"/api/games/{created['id']}/correct").get_json()
    assert first['new_score'] == 1 and first['word'] in catalog
    second = alice.post(f"/api/games/{created['id']}/correct").get_json()
    assert second['new_score'] == 2
    third = alice.post(f"/api/games/{created['id']}/correct").get_json()
    assert third == {'word': None, 'new_score': 3, 'game_over': True, 'winner': 1}

    state = bob.get(f"/api/games/{created['id']}").get_json()
    assert state['status'] == 'finished'
    assert state['winner'] == 1
    assert state['team1_score'] == 3
    assert state['words_guessed'] == 3

    res = alice.post(f"/api/games/{created['id']}/start-turn")
    assert res.status_code == 409
    assert res.get_json()['code'] == 'game_not_playing'
    res = alice.post(f"/api/games/{created['id']}/correct")
    assert res.status_code == 409


def test_correct_without_active_word(guest, catalog):
    created, (alice, _), _ = _two_player_game(guest)
    alice.post(f"/api/games/{created['id']}/start")
    res = alice.post(f"/api/games/{created['id']}/correct")
    assert res.status_code == 409
    assert res.get_json()['code'] == 'no_active_word'


def test_end_turn_revokes_and_floors_at_zero(guest, catalog):
    created, (alice, _), (bob, bob_user) = _two_player_game(guest)
    alice.post(f"/api/games/{created['id']}/start")
    alice.post(f"/api/games/{created['id']}/start-turn")
    alice.post(f"/api/games/{created['id']}/correct")
    alice.post(f"/api/games/{created['id']}/correct")

    res = alice.post(f"/api/games/{created['id']}/end-turn", json={'revoke_points': 5})
    assert res.status_code == 200
    assert res.get_json() == {'current_team': 2, 'next_team': 2, 'revoked': 2}

    state = bob.get(f"/api/games/{created['id']}").get_json()
    assert state['team1_score'] == 0
    assert state['current_team'] == 2
    assert state['current_actor_id'] == bob_user['id']
    assert state['turn_state'] == 'idle'
    assert state['actor_index_team1'] == 1


def test_end_turn_accepts_camel_case_revoke(guest, catalog):
    created, (alice, _), _ = _two_player_game(guest)
    alice.post(f"/api/games/{created['id']}/start")
    alice.post(f"/api/games/{created['id']}/start-turn")
    alice.post(f"/api/games/{created['id']}/correct")
    res = alice.post(f"/api/games/{created['id']}/end-turn", json={'revokePoints': 1})
    assert res.get_json()['revoked'] == 1


def test_end_turn_rejects_bad_revocation_and_outsiders(guest, catalog):
    created, (alice, _), _ = _two_player_game(guest)
    alice.post(f"/api/games/{created['id']}/start")
    res = alice.post(f"/api/games/{created['id']}/end-turn", json={'revoke_points': -1})
    assert res.status_code == 400

    stranger, _ = guest('Stranger')
    res = stranger.post(f"/api/games/{created['id']}/end-turn")
    assert res.status_code == 403
    assert res.get_json()['code'] == 'not_in_game'


def test_skip_and_next_word(guest, catalog):
    created, (alice, _), _ = _two_player_game(guest)
    alice.post(f"/api/games/{created['id']}/start")
    word = alice.post(f"/api/games/{created['id']}/start-turn").get_json()['word']
    skipped = alice.post(f"/api/games/{created['id']}/skip").get_json()
    assert skipped['word'] != word
    assert skipped['word'] in catalog
    # Acting already: next-word just repeats the current word
    assert alice.post(f"/api/games/{created['id']}/next-word").get_json() == {'word': skipped['word']}


def test_end_game_only_by_creator(guest, catalog):
    created, (alice, _), (bob, _) = _two_player_game(guest)
    alice.post(f"/api/games/{created['id']}/start")
    assert bob.post(f"/api/games/{created['id']}/end").status_code == 403
    res = alice.post(f"/api/games/{created['id']}/end")
    assert res.status_code == 200
    assert res.get_json() == {'success': True, 'winner': None}
    assert alice.get(f"/api/games/{created['id']}").get_json()['status'] == 'finished'


def test_list_and_delete_games(guest, catalog):
    created, (alice, _), (bob, _) = _two_player_game(guest)
    assert [g['id'] for g in bob.get('/api/games').get_json()] == [created['id']]

    alice.post(f"/api/games/{created['id']}/start")
    word = alice.post(f"/api/games/{created['id']}/start-turn").get_json()['word']
    # The listing hides the word from everyone but the actor
    assert bob.get('/api/games').get_json()[0]['current_word'] is None
    assert alice.get('/api/games').get_json()[0]['current_word'] == word

    assert bob.delete(f"/api/games/{created['id']}").status_code == 403
    assert alice.delete(f"/api/games/{created['id']}").status_code == 200
    assert alice.get(f"/api/games/{created['id']}").status_code == 404
    assert bob.get('/api/games').get_json() == []


def test_guest_identity(guest):
    c, user = guest('  ')
    assert user['username'].startswith('Guest_')
    assert c.get('/api/auth/me').get_json()['id'] == user['id']
    assert c.post('/api/auth/logout').status_code == 200
    assert c.get('/api/auth/me').status_code == 401


def _login_as(flask_app, user_id):
    c = flask_app.test_client()
    with c.session_transaction() as sess:
        sess['_user_id'] = str(user_id)
        sess['_fresh'] = True
    return c


def test_word_admin(flask_app, make_user):
    admin = _login_as(flask_app, make_user('root', is_admin=True))
    player = _login_as(flask_app, make_user('pleb'))

    assert player.get('/api/words').status_code == 403
    res = admin.post('/api/words', json={'words': ['Kayak', 'kayak', 'Yoga']})
    assert res.status_code == 201
    assert res.get_json() == {'added': ['kayak', 'yoga']}
    assert admin.get('/api/words').get_json() == ['kayak', 'yoga']

    assert admin.delete('/api/words/kayak').status_code == 200
    assert admin.delete('/api/words/kayak').status_code == 404
    assert admin.post('/api/words', json={'words': []}).status_code == 400


def test_seed_words_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['seed-words', 'Trampoline'])
    assert result.exit_code == 0
    from charades.services.games.words import DEFAULT_WORDS, list_words
    with flask_app.app_context():
        catalog = list_words()
    assert 'trampoline' in catalog
    assert len(catalog) == len(DEFAULT_WORDS) + 1
