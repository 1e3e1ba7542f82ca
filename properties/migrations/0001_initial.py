import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PropertyType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('category', models.CharField(choices=[('Residential', 'Residential'), ('Commercial', 'Commercial'), ('Land', 'Land'), ('Industrial', 'Industrial'), ('Agriculture', 'Agriculture'), ('Rental', 'Rental'), ('Other', 'Other')], max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Property Type',
                'verbose_name_plural': 'Property Types',
                'ordering': ['category', 'name'],
                'constraints': [models.UniqueConstraint(fields=('category', 'name'), name='unique_property_type_per_category')],
            },
        ),
        migrations.CreateModel(
            name='Property',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('meta_description', models.TextField(blank=True)),
                ('meta_keywords', models.CharField(blank=True, max_length=500)),
                ('category', models.CharField(choices=[('Residential', 'Residential'), ('Commercial', 'Commercial'), ('Land', 'Land'), ('Industrial', 'Industrial'), ('Agriculture', 'Agriculture'), ('Rental', 'Rental'), ('Other', 'Other')], db_index=True, max_length=20)),
                ('property_age', models.CharField(blank=True, choices=[('New', 'New'), ('<1 year', '<1 year'), ('1 - 5 years', '1 - 5 years'), ('5 - 10 years', '5 - 10 years'), ('10+ years', '10+ years')], max_length=20)),
                ('rera_approved', models.BooleanField(default=False)),
                ('feature_image', models.FileField(blank=True, upload_to='properties/features/')),
                ('catalog_type', models.CharField(blank=True, choices=[('New Project', 'New Project'), ('Project', 'Project'), ('Resales', 'Resales'), ('Rental', 'Rental'), ('Other', 'Other')], db_index=True, max_length=20)),
                ('overview', models.TextField(blank=True)),
                ('built_up_area', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('is_built_up_area_enabled', models.BooleanField(default=False)),
                ('carpet_area', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('is_carpet_area_enabled', models.BooleanField(default=False)),
                ('super_built_up_area', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('is_super_built_up_area_enabled', models.BooleanField(default=False)),
                ('unit_of_measurement', models.CharField(choices=[('sq. ft', 'sq. ft'), ('sq. m', 'sq. m'), ('acres', 'acres'), ('other', 'other')], default='sq. ft', max_length=10)),
                ('total_floors', models.PositiveIntegerField(blank=True, null=True)),
                ('is_total_floors_enabled', models.BooleanField(default=False)),
                ('floor_number', models.IntegerField(blank=True, null=True)),
                ('is_floor_number_enabled', models.BooleanField(default=False)),
                ('bedrooms', models.PositiveIntegerField(blank=True, null=True)),
                ('is_bedrooms_enabled', models.BooleanField(default=False)),
                ('bathrooms', models.PositiveIntegerField(blank=True, null=True)),
                ('is_bathrooms_enabled', models.BooleanField(default=False)),
                ('balconies', models.PositiveIntegerField(blank=True, null=True)),
                ('is_balconies_enabled', models.BooleanField(default=False)),
                ('servant_room', models.BooleanField(default=False)),
                ('parking_spaces', models.PositiveIntegerField(blank=True, null=True)),
                ('is_parking_spaces_enabled', models.BooleanField(default=False)),
                ('amenities', models.JSONField(blank=True, default=list)),
                ('furnishing_status', models.CharField(blank=True, choices=[('fully', 'Fully furnished'), ('semi', 'Semi furnished'), ('unfurnished', 'Unfurnished')], max_length=20)),
                ('flooring_type', models.CharField(blank=True, choices=[('vitrified', 'Vitrified'), ('marble', 'Marble'), ('wood', 'Wood'), ('other', 'Other')], max_length=20)),
                ('kitchen_type', models.CharField(blank=True, choices=[('modular', 'Modular'), ('normal', 'Normal')], max_length=20)),
                ('furniture_included', models.TextField(blank=True)),
                ('locality', models.CharField(blank=True, max_length=200)),
                ('address_line', models.CharField(blank=True, max_length=500)),
                ('city', models.CharField(db_index=True, max_length=100)),
                ('state', models.CharField(db_index=True, max_length=100)),
                ('country', models.CharField(default='India', max_length=100)),
                ('pincode', models.CharField(blank=True, max_length=10)),
                ('landmark', models.CharField(blank=True, max_length=200)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('bus_stop', models.CharField(blank=True, max_length=100)),
                ('metro_station', models.CharField(blank=True, max_length=100)),
                ('hospital_distance', models.CharField(blank=True, max_length=100)),
                ('mall_distance', models.CharField(blank=True, max_length=100)),
                ('airport_distance', models.CharField(blank=True, max_length=100)),
                ('school_distance', models.CharField(blank=True, max_length=100)),
                ('other_connectivity', models.TextField(blank=True)),
                ('listing_price', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('price_type', models.CharField(choices=[('fixed', 'Fixed'), ('negotiable', 'Negotiable'), ('auction', 'Auction')], default='fixed', max_length=20)),
                ('maintenance_charge', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('security_deposit', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('booking_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('registration_charge', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('loan_available', models.BooleanField(default=False)),
                ('listed_by', models.CharField(choices=[('Owner', 'Owner'), ('Agent', 'Agent'), ('Builder', 'Builder'), ('Team', 'Team')], default='Owner', max_length=20)),
                ('contact_name', models.CharField(max_length=200)),
                ('contact_phone', models.CharField(max_length=20)),
                ('contact_alt_phone', models.CharField(blank=True, max_length=20)),
                ('contact_email', models.EmailField(db_index=True, max_length=254)),
                ('agency_name', models.CharField(blank=True, max_length=200)),
                ('rera_id', models.CharField(blank=True, max_length=100)),
                ('contact_time', models.CharField(blank=True, choices=[('Morning', 'Morning'), ('Afternoon', 'Afternoon'), ('Evening', 'Evening')], max_length=20)),
                ('status', models.CharField(choices=[('Pending Verification', 'Pending Verification'), ('For Sale', 'For Sale'), ('Under Contract', 'Under Contract'), ('Sold', 'Sold')], db_index=True, default='Pending Verification', max_length=30)),
                ('views', models.PositiveIntegerField(default=0)),
                ('modification_notes', models.TextField(blank=True)),
                ('earning_rules', models.JSONField(blank=True, default=dict, help_text="Per partner role: {'affiliate': {'type': 'flat_amount', 'value': '5000'}}")),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='properties', to=settings.AUTH_USER_MODEL)),
                ('property_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='properties', to='properties.propertytype')),
            ],
            options={
                'verbose_name': 'Property',
                'verbose_name_plural': 'Properties',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'category'], name='properties__status_5b1c7e_idx'),
                    models.Index(fields=['city', 'state'], name='properties__city_8d2f41_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PropertySlide',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(blank=True, max_length=200)),
                ('image', models.FileField(upload_to='properties/slides/')),
                ('position', models.PositiveIntegerField(default=0)),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='slides', to='properties.property')),
            ],
            options={
                'verbose_name': 'Property Slide',
                'verbose_name_plural': 'Property Slides',
                'ordering': ['property', 'position', 'id'],
            },
        ),
    ]
