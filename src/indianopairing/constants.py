# Indiano Pairing
# Copyright (C) 2025  Indiano Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

# --- Constants ---
SNAPSHOT_VERSION = 3
SAVE_FILE_EXTENSION = ".json"

# Logging configuration (environment variables)
LOG_DIR_ENV = "INDIANO_PAIRING_LOG_DIR"
LOG_LEVEL_ENV = "INDIANO_PAIRING_LOG_LEVEL"
LOG_FILE_NAME = "indiano-pairing.log"

# Elo rating
INITIAL_ELO = 1500
K_FACTOR = 32
ELO_SCALE = 400
MIN_ELO = 100
MAX_ELO = 3000

# Point multiplier (display weighting only)
MULTIPLIER_SLOPE = 0.7
MIN_POINT_MULTIPLIER = 0.5
MAX_POINT_MULTIPLIER = 1.5

# Partner pairing weights
PARTNER_NEW_BONUS = 2000
PARTNER_ONCE_PENALTY = -500
PARTNER_TWICE_PENALTY = -1500
PARTNER_REPEAT_PENALTY = -2000  # per repeat beyond the first
PARTNER_SKILL_WEIGHT = 20

# Opponent matching weights
OPPONENT_NEW_BONUS = 2000
OPPONENT_REPEAT_PENALTY = -300  # per previous meeting
OPPONENT_BALANCE_WEIGHT = 50

# Players per court
PLAYERS_PER_MATCH = 4
MIN_PAIRS_PER_ROUND = 2

# Skill metrics
SKILL_ELO = "elo"
SKILL_PPG = "ppg"
SKILL_EPSILON = {
    SKILL_ELO: 10.0,
    SKILL_PPG: 0.01,
}

# Leaderboard
LEADERBOARD_PPG = "ppg"
LEADERBOARD_TOTAL = "total"
LEADERBOARD_ELO = "elo"
LEADERBOARD_MODES = (LEADERBOARD_PPG, LEADERBOARD_TOTAL, LEADERBOARD_ELO)
RANKING_EPSILON = 0.001

# Match scoring
DEFAULT_POINTS_TO_WIN = 32
MIN_POINTS_TO_WIN = 3
MAX_POINTS_TO_WIN = 99

# Service rotation order within a match
SERVER_ROTATION = ("pair1-p1", "pair2-p1", "pair1-p2", "pair2-p2")
FIRST_SERVER = SERVER_ROTATION[0]

# Sitting out
MULTI_SIT_OUT_ID = "multi"

# Finals
FINALS_MATCH_ID = "finals"
