from charades import db
from flask_login import UserMixin
import enum
import string
import random
import time

TEAMS = (1, 2)

# Game.status values
WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'


class TurnState(str, enum.Enum):
    """Sub-state of a playing game.

    IDLE: no turn in progress, the current actor may start one.
    ACTING: a word is assigned and the turn clock is running.
    AWAITING_NEXT: the previous word was resolved; the actor must ask for another.
    """
    IDLE = 'idle'
    ACTING = 'acting'
    AWAITING_NEXT = 'awaiting_next'


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=False, index=True)
    is_guest = db.Column(db.Boolean, default=True, nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'is_guest': self.is_guest,
            'is_admin': self.is_admin,
        }


class GamePlayer(db.Model):
    __tablename__ = 'game_player'
    __table_args__ = (db.UniqueConstraint('game_id', 'user_id', name='uq_game_player_user'),)
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    team = db.Column(db.Integer, nullable=False)
    turn_order = db.Column(db.Integer, nullable=False)
    game = db.relationship('Game', back_populates='players')
    user = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'game_id': self.game_id,
            'user_id': self.user_id,
            'team': self.team,
            'turn_order': self.turn_order,
            'username': self.user.username if self.user else None,
        }


def generate_join_code(length=6):
    """Generate a unique, short join code.

    Codes always hold at least one letter so they never read as a numeric game id.
    """
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code.isdigit():
            continue
        if not Game.query.filter_by(join_code=code).first():
            return code


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, default='New Game')
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    join_code = db.Column(db.String(16), unique=True, index=True)
    team1_name = db.Column(db.String(64), nullable=False, default='Team 1')
    team2_name = db.Column(db.String(64), nullable=False, default='Team 2')
    team1_score = db.Column(db.Integer, nullable=False, default=0)
    team2_score = db.Column(db.Integer, nullable=False, default=0)
    current_team = db.Column(db.Integer, nullable=False, default=1)
    actor_index_team1 = db.Column(db.Integer, nullable=False, default=0)
    actor_index_team2 = db.Column(db.Integer, nullable=False, default=0)
    turn_duration = db.Column(db.Integer, nullable=False, default=30)
    winning_score = db.Column(db.Integer, nullable=False, default=30)
    status = db.Column(db.String(16), nullable=False, default=WAITING)
    turn_state = db.Column(db.String(16), nullable=False, default=TurnState.IDLE.value)
    current_word = db.Column(db.String(64), nullable=True)
    turn_started_at = db.Column(db.Float, nullable=True)  # epoch seconds
    current_round = db.Column(db.Integer, nullable=False, default=1)
    winner = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.Float, nullable=False, default=time.time)
    players = db.relationship('GamePlayer', back_populates='game', order_by='GamePlayer.turn_order',
                              cascade='all, delete-orphan')
    words = db.relationship('GameWord', back_populates='game', cascade='all, delete-orphan')

    def __init__(self, **kwargs):
        code_length = kwargs.pop('join_code_length', 6)
        super(Game, self).__init__(**kwargs)
        if not self.join_code:
            self.join_code = generate_join_code(code_length)

    @property
    def phase(self):
        return TurnState(self.turn_state or TurnState.IDLE.value)

    def team_name(self, team):
        return self.team1_name if team == 1 else self.team2_name

    def score_of(self, team):
        return self.team1_score if team == 1 else self.team2_score

    def set_score(self, team, value):
        if team == 1:
            self.team1_score = value
        else:
            self.team2_score = value

    def actor_index(self, team):
        return self.actor_index_team1 if team == 1 else self.actor_index_team2

    def set_actor_index(self, team, value):
        if team == 1:
            self.actor_index_team1 = value
        else:
            self.actor_index_team2 = value

    def team_players(self, team):
        return sorted((p for p in self.players if p.team == team), key=lambda p: p.turn_order)

    def member(self, user_id):
        return next((p for p in self.players if p.user_id == user_id), None)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'owner_id': self.owner_id,
            'join_code': self.join_code,
            'team1_name': self.team1_name,
            'team2_name': self.team2_name,
            'team1_score': self.team1_score,
            'team2_score': self.team2_score,
            'current_team': self.current_team,
            'actor_index_team1': self.actor_index_team1,
            'actor_index_team2': self.actor_index_team2,
            'turn_duration': self.turn_duration,
            'winning_score': self.winning_score,
            'status': self.status,
            'turn_state': self.turn_state,
            'current_word': self.current_word,
            'turn_started_at': self.turn_started_at,
            'current_round': self.current_round,
            'winner': self.winner,
        }


class Word(db.Model):
    __tablename__ = 'word'
    id = db.Column(db.Integer, primary_key=True)
    word = db.Column(db.String(64), unique=True, nullable=False)

    def to_dict(self):
        return {'id': self.id, 'word': self.word}


class GameWord(db.Model):
    __tablename__ = 'game_word'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    word = db.Column(db.String(64), nullable=False)
    guessed = db.Column(db.Boolean, default=False, nullable=False)
    guessed_by_team = db.Column(db.Integer, nullable=True)
    game = db.relationship('Game', back_populates='words')

    def to_dict(self):
        return {
            'id': self.id,
            'word': self.word,
            'guessed': self.guessed,
            'guessed_by_team': self.guessed_by_team,
        }
