"""Landmark, joint and phase definitions shared across the pipeline."""

# MediaPipe Pose format (33 landmarks)
MP_LANDMARK_NAMES = [
    'NOSE', 'LEFT_EYE_INNER', 'LEFT_EYE', 'LEFT_EYE_OUTER',
    'RIGHT_EYE_INNER', 'RIGHT_EYE', 'RIGHT_EYE_OUTER',
    'LEFT_EAR', 'RIGHT_EAR', 'MOUTH_LEFT', 'MOUTH_RIGHT',
    'LEFT_SHOULDER', 'RIGHT_SHOULDER', 'LEFT_ELBOW', 'RIGHT_ELBOW',
    'LEFT_WRIST', 'RIGHT_WRIST', 'LEFT_PINKY', 'RIGHT_PINKY',
    'LEFT_INDEX', 'RIGHT_INDEX', 'LEFT_THUMB', 'RIGHT_THUMB',
    'LEFT_HIP', 'RIGHT_HIP', 'LEFT_KNEE', 'RIGHT_KNEE',
    'LEFT_ANKLE', 'RIGHT_ANKLE', 'LEFT_HEEL', 'RIGHT_HEEL',
    'LEFT_FOOT_INDEX', 'RIGHT_FOOT_INDEX'
]

MP_NAME_TO_INDEX = {name: i for i, name in enumerate(MP_LANDMARK_NAMES)}

SIDES = ("left", "right")

# Landmarks read per side: shoulder-equivalent, hip, knee, ankle
SIDE_LANDMARKS = {
    side: {
        joint: MP_NAME_TO_INDEX[f"{side.upper()}_{joint.upper()}"]
        for joint in ("shoulder", "hip", "knee", "ankle")
    }
    for side in SIDES
}

JOINTS = ("hip", "knee", "ankle")

# Eight canonical running-gait phases, in cycle order
PHASE_NAMES = ("IC", "LR", "MS", "TS", "PSw", "ISw", "MidSw", "TSw")

PHASE_LABELS = {
    "IC": "Initial Contact",
    "LR": "Loading Response",
    "MS": "Mid Stance",
    "TS": "Terminal Stance",
    "PSw": "Pre-Swing",
    "ISw": "Initial Swing",
    "MidSw": "Mid Swing",
    "TSw": "Terminal Swing",
}

JOINT_LABELS = {
    "hip": "Hip",
    "knee": "Knee",
    "ankle": "Ankle",
}

# Vertical offset (normalized image units) of the virtual point below the
# ankle used as the distal reference for the ankle angle.
ANKLE_REFERENCE_OFFSET = 0.1
