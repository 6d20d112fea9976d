"""Constants and mappings for the fplive scoring engine."""

# Upstream element_type -> short position label
POSITION_LABELS = {
    1: 'GKP',
    2: 'DEF',
    3: 'MID',
    4: 'FWD',
}

# Upstream chip codes (picks endpoint `active_chip`)
CHIP_TRIPLE_CAPTAIN = '3xc'
CHIP_BENCH_BOOST = 'bboost'
CHIP_FREE_HIT = 'freehit'
CHIP_WILDCARD = 'wildcard'

# Squad shape
SQUAD_SIZE = 15
BACKUP_GK_SLOT = 12

# Full 15-man squad composition
SQUAD_COMPOSITION = {
    'GKP': 2,
    'DEF': 5,
    'MID': 5,
    'FWD': 3,
}

# Bonus source labels on PlayerScore
BONUS_OFFICIAL = 'official'
BONUS_PROVISIONAL = 'provisional'
BONUS_NONE = 'none'

# Differential kinds
DIFF_PURE = 'pure'
DIFF_POSITION = 'position'
DIFF_CAPTAIN = 'captain'
DIFF_TRANSFER_HIT = 'transfer_hit'

# Points deducted per extra transfer
TRANSFER_HIT_COST = 4
