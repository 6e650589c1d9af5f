"""Ethnic groups played, in round order."""

# (name, male image, female image, lat, lng)
ETHNIC_GROUPS = [
    (
        "Javanese",
        "https://picsum.photos/400/400?random=1",
        "https://picsum.photos/400/400?random=2",
        -7.1544,
        110.1451,
    ),  # Central Java, Indonesia
    (
        "Balinese",
        "https://picsum.photos/400/400?random=3",
        "https://picsum.photos/400/400?random=4",
        -8.3405,
        115.0920,
    ),  # Bali, Indonesia
    (
        "Filipino",
        "https://picsum.photos/400/400?random=5",
        "https://picsum.photos/400/400?random=6",
        12.8797,
        121.7740,
    ),  # Philippines
    (
        "Dayak",
        "https://picsum.photos/400/400?random=7",
        "https://picsum.photos/400/400?random=8",
        0.9619,
        114.5548,
    ),  # Borneo/Kalimantan
    (
        "Minangkabau",
        "https://picsum.photos/400/400?random=9",
        "https://picsum.photos/400/400?random=10",
        -0.7893,
        100.9975,
    ),  # West Sumatra, Indonesia
]
