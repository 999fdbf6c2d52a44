"""SKY130 design rules and the tile grid. All dimensions in nm."""

from strongarm.pdk.rules import DesignRules

sky130_rules = DesignRules(
    tech_name='sky130A',

    # Routing layers
    LI={'MIN_W': 170, 'MIN_S': 170},
    M1={'MIN_W': 140, 'MIN_S': 140},
    M2={'MIN_W': 140, 'MIN_S': 140},
    M3={'MIN_W': 300, 'MIN_S': 300},
    M4={'MIN_W': 300, 'MIN_S': 300},

    # Cuts. ENC_*_ADJ is the enclosure in x, ENC_* in y.
    MCON={'W': 170, 'H': 170, 'S': 190,
          'ENC_BOT': 0, 'ENC_BOT_ADJ': 0, 'ENC_TOP': 30, 'ENC_TOP_ADJ': 60},
    VIA1={'W': 150, 'H': 150, 'S': 170,
          'ENC_BOT': 55, 'ENC_BOT_ADJ': 85, 'ENC_TOP': 55, 'ENC_TOP_ADJ': 85},
    VIA2={'W': 200, 'H': 200, 'S': 200,
          'ENC_BOT': 50, 'ENC_BOT_ADJ': 60, 'ENC_TOP': 65, 'ENC_TOP_ADJ': 75},
    VIA3={'W': 200, 'H': 200, 'S': 200,
          'ENC_BOT': 60, 'ENC_BOT_ADJ': 90, 'ENC_TOP': 65, 'ENC_TOP_ADJ': 65},

    # Placement grid shared by MOS and tap rows
    GRID={'TRACK': 340, 'CPP': 460},

    # MOS row. Straps and gate positions are measured from the row edges.
    MOS={
        'ROW_TRACKS': 6,
        'L': 150,
        'POLY_EXT': 170,
        'LI_W': 170,
        'SD_BOT': 340,
        'SD_TOP_GAP': 595,
        'GATE_Y': 340,
        'DIFF_INSET': 255,
        # met1 bar heights of sd[0] and sd[1], from the row bottom
        'M1_BAR_Y': [510, 1190],
    },

    # Tap row
    TAP={
        'ROW_TRACKS': 2,
        'LI_W': 170,
        'EDGE': 145,
        'DIFF_INSET': 170,
    },
)
