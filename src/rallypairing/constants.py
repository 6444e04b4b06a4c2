# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
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
SAVE_FILE_EXTENSION = ".json"

# Ratings
DEFAULT_RATING = 1000
SEED_PRIOR_BASE = 1000
SEED_PRIOR_SPREAD = 25  # rating points between adjacent seeds

# Maturity weights (beta) used when blending rating with seed prior
BETA_OPENING = 0.0  # stage 1, wave 1
BETA_EARLY = 0.4  # stage 1, wave 2
BETA_SETTLED = 0.7  # stage 1 later waves, stage 2
BETA_MATURE = 0.8  # stage 3 onwards

# Stage kinds
KIND_PRELIM = "prelim"
KIND_EIGHT = "eight"
KIND_FINAL = "final"

# Round lifecycle
ROUND_PENDING = "pending"
ROUND_ACTIVE = "active"
ROUND_CLOSED = "closed"

# Match status
MATCH_SCHEDULED = "scheduled"
MATCH_COMPLETED = "completed"

# Compromise tags, worst first
COMPROMISE_REPEAT_PARTNER = "repeat-partner"
COMPROMISE_REPEAT_OPPONENT = "repeat-opponent"
COMPROMISE_RATING_GAP = "rating-gap"
COMPROMISE_SEVERITY = {
    COMPROMISE_REPEAT_PARTNER: 3,
    COMPROMISE_REPEAT_OPPONENT: 2,
    COMPROMISE_RATING_GAP: 1,
}

# Round planning
MIN_PLAYERS = 8
FINAL_SIZE = 4
EIGHT_SIZE = 8
THREE_ROUND_CAP = 3
PROGRESSION_TABLE = {24: 16, 20: 16, 16: 12, 12: 8, 8: 4}

# Wave formats
WAVE_FORMAT_ADAPTIVE = "adaptive"
WAVE_FORMAT_GATED = "gated"
WAVE_FORMATS = (WAVE_FORMAT_ADAPTIVE, WAVE_FORMAT_GATED)
DEFAULT_WAVE_FORMAT = WAVE_FORMAT_ADAPTIVE

# Wave kinds and orders
WAVE_EXPLORE = "explore"
WAVE_SHOWDOWN = "showdown"
ORDER_ALTERNATING = "explore-showdown-explore-showdown"
ORDER_FRONT_LOADED = "explore-explore-showdown"
WAVE_ORDERS = (ORDER_ALTERNATING, ORDER_FRONT_LOADED)
DEFAULT_WAVE_ORDER = ORDER_ALTERNATING

# Score caps and target games
ROUND1_SCORE_CAP = 21
LATER_SCORE_CAP = 11
ROUND1_TARGET_GAMES = 3
LATER_TARGET_GAMES = 2
FINAL_MATCHES = 3

# Adaptive pairing weights
PARTNER_REPEAT_PENALTY = 5000
TIER_SIZE = 4
TIER_PENALTY_SAME = 0
TIER_PENALTY_ADJACENT = 40
TIER_PENALTY_FAR = 250
OPPONENT_REPEAT_WEIGHT = 60
RATING_GAP_THRESHOLD = 80  # team-average blend points

# Gate-based waves
BAND_SIZE = 4
PARTNER_GAP_CAP = 2 * BAND_SIZE - 3
MAX_EDGE_CANDIDATES = 6

# Elo
ELO_BASE_K = 24
ELO_K_MIN = 8
ELO_K_MAX = 40
ELO_SCALE = 400
TEAM_SPREAD_PENALTY = 0.03
SHARE_FLOOR = 0.05
SHARE_CEILING = 0.95
UNCERTAINTY_BOOST = 0.6
DIFFICULTY_LIMIT = 0.25
SAME_PARTNER_DAMP = 0.9
REPEAT_OPPONENT_DAMP = 0.95
SURPRISE_BASE = 0.5
WAVE_CLAMP_R1W1 = 20
WAVE_CLAMP_R1W2 = 30
WAVE_CLAMP_DEFAULT = 40
