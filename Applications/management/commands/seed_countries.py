from decimal import Decimal
from django.core.management.base import BaseCommand
from Applications.models import Country, VisaType

class Command(BaseCommand):
    help = "Seed destination countries and their visa types"

    def handle(self, *args, **kwargs):
        COUNTRIES = [
            # code, name, flag, min days, max days
            ("USA", "United States", "🇺🇸", 15, 30),
            ("CAN", "Canada", "🇨🇦", 20, 40),
            ("GBR", "United Kingdom", "🇬🇧", 15, 25),
        ]

        VISA_TYPES = {
            "USA": [
                ("Tourist", "B-2 Tourist/Visitor Visa", "160.00", 21),
                ("Business", "B-1 Business Visa", "160.00", 21),
                ("Student", "F-1 Student Visa", "350.00", 30),
                ("Work", "H-1B Work Visa", "460.00", 45),
            ],
            "CAN": [
                ("Tourist", "Temporary Resident Visa", "100.00", 30),
                ("Business", "Business Visitor Visa", "100.00", 30),
                ("Student", "Study Permit", "150.00", 35),
                ("Work", "Work Permit", "155.00", 40),
            ],
            "GBR": [
                ("Tourist", "Standard Visitor Visa", "95.00", 21),
                ("Business", "Business Visitor Visa", "95.00", 21),
                ("Student", "Student Visa", "348.00", 28),
                ("Work", "Skilled Worker Visa", "610.00", 35),
            ],
        }

        created_count = 0
        for code, name, flag, min_days, max_days in COUNTRIES:
            country, _ = Country.objects.get_or_create(
                code=code,
                defaults={
                    "name": name,
                    "flag_emoji": flag,
                    "processing_time_min": min_days,
                    "processing_time_max": max_days,
                },
            )

            for visa_name, desc, fee, days in VISA_TYPES[code]:
                _, created = VisaType.objects.get_or_create(
                    country=country,
                    name=visa_name,
                    defaults={
                        "description": desc,
                        "fee": Decimal(fee),
                        "processing_time_days": days,
                    },
                )
                created_count += created

        if not created_count:
            self.stdout.write(self.style.WARNING("Visa types already exist, nothing to seed"))
            return

        self.stdout.write(self.style.SUCCESS(f"✅ Seeded {created_count} visa types"))
