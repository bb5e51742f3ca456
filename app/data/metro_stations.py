"""
Tashkent metro stations

Three lines, 29 stations:
    Chilanzar (red)     11
    Uzbekistan (blue)   12
    Yunusabad (green)    6
"""
from app.models.metro_station import MetroLine

LINE_NAMES = {
    MetroLine.CHILANZAR: ("Чилонзорская", "Chilonzor"),
    MetroLine.UZBEKISTAN: ("Узбекистанская", "O'zbekiston"),
    MetroLine.YUNUSABAD: ("Юнусабадская", "Yunusobod"),
}

# (name_ru, name_uz, latitude, longitude, opened_year), in line order
STATIONS = {
    MetroLine.CHILANZAR: [
        ("Чилонзор", "Chilonzor", 41.2758, 69.2036, 1977),
        ("Миробод", "Mirobod", 41.2847, 69.2167, 1980),
        ("Новза", "Novza", 41.2901, 69.2294, 1980),
        ("Буюк Ипак Йули", "Buyuk Ipak Yuli", 41.2961, 69.2408, 1980),
        ("Амир Темур Хиёбони", "Amir Temur Hiyoboni", 41.3111, 69.2497, 1991),
        ("Хамид Олимжон", "Hamid Olimjon", 41.3208, 69.2575, 1991),
        ("Алишер Навои", "Alisher Navoiy", 41.3267, 69.2658, 1984),
        ("Мустақиллик Майдони", "Mustaqillik Maydoni", 41.3150, 69.2794, 1991),
        ("Пахтакор", "Paxtakor", 41.3042, 69.2881, 1991),
        ("Бобур", "Bobur", 41.3047, 69.3036, 1991),
        ("Машҳур Жусуп", "Mashxur Jusup", 41.3042, 69.3236, 2020),
    ],
    MetroLine.UZBEKISTAN: [
        ("Алмазар", "Olmazar", 41.3458, 69.2089, 2001),
        ("Чорсу", "Chorsu", 41.3295, 69.2336, 2001),
        ("Гафур Гулом", "G'afur G'ulom", 41.3253, 69.2503, 2001),
        ("Абдулла Қодирий", "Abdulla Qodiriy", 41.3181, 69.2539, 2001),
        ("Миллий Бог", "Milliy Bog'", 41.3111, 69.2653, 2001),
        ("Узбекистон", "O'zbekiston", 41.2997, 69.2672, 2001),
        ("Космонавтлар", "Kosmonavtlar", 41.2881, 69.2714, 2001),
        ("Оибек", "Oybek", 41.2750, 69.2775, 2001),
        ("Тинчлик", "Tinchlik", 41.2647, 69.2825, 2001),
        ("Ўзбекистон Файласуфлари", "O'zbekiston Faylasuflari", 41.2508, 69.2883, 2001),
        ("Бунёдкор", "Bunyodkor", 41.2367, 69.2950, 2001),
        ("Дўстлик", "Do'stlik", 41.2233, 69.3014, 2001),
    ],
    MetroLine.YUNUSABAD: [
        ("Юнусобод", "Yunusobod", 41.3614, 69.2886, 2001),
        ("Амир Темур", "Amir Temur", 41.3444, 69.2836, 2001),
        ("Шахристон", "Shahriston", 41.3286, 69.2786, 2001),
        ("Бодомзор", "Bodomzor", 41.3111, 69.2736, 2001),
        ("Минор", "Minor", 41.2939, 69.2686, 2001),
        ("Миллий Бог", "Milliy Bog'", 41.3111, 69.2653, 2001),
    ],
}


def iter_station_rows():
    """Yield keyword dicts ready for MetroStation(**row)"""
    for line, stations in STATIONS.items():
        line_name_ru, line_name_uz = LINE_NAMES[line]
        for order, (name_ru, name_uz, lat, lng, opened) in enumerate(stations, start=1):
            yield {
                "name_ru": name_ru,
                "name_uz": name_uz,
                "line": line,
                "line_name_ru": line_name_ru,
                "line_name_uz": line_name_uz,
                "latitude": lat,
                "longitude": lng,
                "order": order,
                "opened_year": opened,
                "is_operational": True,
            }
