#!/usr/bin/env python3
"""
Static place and region tables used for text-based geo-tagging.

Declaration order matters: locations tie-break on it, and regions are
checked in order with the first keyword hit winning.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

Coords = Tuple[float, float]


@dataclass(frozen=True)
class Region:
    """A coarse geographic bucket matched by keyword."""
    name: str
    keywords: Tuple[str, ...]
    bounds: Tuple[Coords, Coords]  # (south-west, north-east)


LOCATION_COORDS: Dict[str, Coords] = {
    # Cities
    'London': (51.5074, -0.1278),
    'Paris': (48.8566, 2.3522),
    'Berlin': (52.5200, 13.4050),
    'Moscow': (55.7558, 37.6173),
    'Madrid': (40.4168, -3.7038),
    'Rome': (41.9028, 12.4964),
    'Brussels': (50.8503, 4.3517),
    'Amsterdam': (52.3676, 4.9041),
    'Vienna': (48.2082, 16.3738),
    'Washington': (38.9072, -77.0369),
    'New York': (40.7128, -74.0060),
    'Los Angeles': (34.0522, -118.2437),
    'Toronto': (43.6532, -79.3832),
    'Mexico City': (19.4326, -99.1332),
    'Buenos Aires': (-34.6037, -58.3816),
    'São Paulo': (-23.5505, -46.6333),
    'Beijing': (39.9042, 116.4074),
    'Tokyo': (35.6762, 139.6503),
    'Delhi': (28.7041, 77.1025),
    'Seoul': (37.5665, 126.9780),
    'Shanghai': (31.2304, 121.4737),
    'Mumbai': (19.0760, 72.8777),
    'Bangkok': (13.7563, 100.5018),
    'Singapore': (1.3521, 103.8198),
    'Cairo': (30.0444, 31.2357),
    'Lagos': (6.5244, 3.3792),
    'Nairobi': (-1.2921, 36.8219),
    'Johannesburg': (-26.2041, 28.0473),
    'Cape Town': (-33.9249, 18.4241),
    'Tel Aviv': (32.0853, 34.7818),
    'Jerusalem': (31.7683, 35.2137),
    'Baghdad': (33.3152, 44.3661),
    'Tehran': (35.6892, 51.3890),
    'Riyadh': (24.7136, 46.6753),
    'Damascus': (33.5138, 36.2765),
    'Beirut': (33.8938, 35.5018),
    'Istanbul': (41.0082, 28.9784),
    'Sydney': (-33.8688, 151.2093),
    'Melbourne': (-37.8136, 144.9631),
    'Auckland': (-36.8485, 174.7633),

    # Countries (approximate centroids)
    'United States': (39.8283, -98.5795),
    'USA': (39.8283, -98.5795),
    'China': (35.8617, 104.1954),
    'Russia': (61.5240, 105.3188),
    'Germany': (51.1657, 10.4515),
    'France': (46.2276, 2.2137),
    'United Kingdom': (55.3781, -3.4360),
    'UK': (55.3781, -3.4360),
    'Japan': (36.2048, 138.2529),
    'India': (20.5937, 78.9629),
    'Brazil': (-14.2350, -51.9253),
    'Canada': (56.1304, -106.3468),
    'Australia': (-25.2744, 133.7751),
    'Spain': (40.4637, -3.7492),
    'Italy': (41.8719, 12.5674),
    'Mexico': (23.6345, -102.5528),
    'South Korea': (35.9078, 127.7669),
    'Indonesia': (-0.7893, 113.9213),
    'Turkey': (38.9637, 35.2433),
    'Saudi Arabia': (23.8859, 45.0792),
    'Iran': (32.4279, 53.6880),
    'Iraq': (33.2232, 43.6793),
    'Syria': (34.8021, 38.9968),
    'Israel': (31.0461, 34.8516),
    'Palestine': (31.9522, 35.2332),
    'Egypt': (26.8206, 30.8025),
    'South Africa': (-30.5595, 22.9375),
    'Nigeria': (9.0820, 8.6753),
    'Ukraine': (48.3794, 31.1656),
    'Poland': (51.9194, 19.1451),

    # Contested / conflict areas
    'Gaza': (31.5, 34.45),
    'West Bank': (32.0, 35.25),
    'Crimea': (45.0, 34.0),
    'Taiwan': (23.7, 121.0),
    'Hong Kong': (22.3193, 114.1694),
    'Kashmir': (34.0, 76.0),
    'Donbas': (48.0, 38.0),
    'Balkans': (43.0, 21.0),

    # Further cities, checked after everything above
    'Kyiv': (50.4501, 30.5234),
    'Kiev': (50.4501, 30.5234),
    'Warsaw': (52.2297, 21.0122),
    'Brasilia': (-15.8267, -47.9218),
    'Jakarta': (-6.2088, 106.8456),
    'Manila': (14.5995, 120.9842),
    'Taipei': (25.0330, 121.5654),
    'Addis Ababa': (9.0320, 38.7469),
    'Dubai': (25.2048, 55.2708),
    'Ankara': (39.9334, 32.8597),
}


REGIONS: Dict[str, Region] = {
    'europe': Region(
        name='Europe',
        keywords=('europe', 'european', 'eu', 'brussels', 'london', 'paris', 'berlin', 'madrid',
                  'rome', 'moscow', 'ukraine', 'russia', 'poland', 'germany', 'france', 'uk',
                  'spain', 'italy'),
        bounds=((35, -10), (71, 40)),
    ),
    'americas': Region(
        name='Americas',
        keywords=('america', 'us', 'usa', 'united states', 'canada', 'mexico', 'brazil',
                  'argentina', 'washington', 'new york', 'toronto', 'buenos aires',
                  'latin america'),
        bounds=((-55, -170), (75, -30)),
    ),
    'asia': Region(
        name='Asia',
        keywords=('asia', 'china', 'japan', 'india', 'korea', 'beijing', 'tokyo', 'delhi',
                  'seoul', 'thailand', 'vietnam', 'singapore', 'indonesia', 'pakistan'),
        bounds=((-10, 60), (55, 150)),
    ),
    'africa': Region(
        name='Africa',
        keywords=('africa', 'african', 'egypt', 'nigeria', 'south africa', 'kenya', 'ethiopia',
                  'cairo', 'lagos', 'nairobi', 'johannesburg'),
        bounds=((-35, -20), (37, 52)),
    ),
    'middle-east': Region(
        name='Middle East',
        keywords=('middle east', 'israel', 'palestine', 'syria', 'iraq', 'iran', 'saudi',
                  'lebanon', 'jordan', 'turkey', 'gulf', 'tel aviv', 'baghdad', 'tehran',
                  'riyadh', 'damascus'),
        bounds=((12, 34), (42, 63)),
    ),
    'oceania': Region(
        name='Oceania',
        keywords=('australia', 'new zealand', 'sydney', 'melbourne', 'auckland', 'pacific'),
        bounds=((-47, 110), (-10, 180)),
    ),
}
