import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MarketingKit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kit_code', models.CharField(blank=True, max_length=20, unique=True)),
                ('title', models.CharField(max_length=200)),
                ('kit_type', models.CharField(choices=[('Poster', 'Poster'), ('Brochure', 'Brochure')], default='Poster', max_length=20)),
                ('feature_image', models.FileField(blank=True, upload_to='marketing/kits/')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Marketing Kit',
                'verbose_name_plural': 'Marketing Kits',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='KitFile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, max_length=255)),
                ('file', models.FileField(upload_to='marketing/kit_files/')),
                ('kit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to='marketing.marketingkit')),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='PartnerWebsite',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('business_name', models.CharField(blank=True, max_length=200)),
                ('business_logo', models.FileField(blank=True, upload_to='marketing/logos/')),
                ('contact_name', models.CharField(blank=True, max_length=200)),
                ('contact_phone', models.CharField(blank=True, max_length=20)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('contact_address', models.TextField(blank=True)),
                ('about_text', models.TextField(blank=True)),
                ('terms_file', models.FileField(blank=True, upload_to='marketing/legal/')),
                ('privacy_file', models.FileField(blank=True, upload_to='marketing/legal/')),
                ('disclaimer_file', models.FileField(blank=True, upload_to='marketing/legal/')),
                ('social_links', models.JSONField(blank=True, default=dict, help_text='{network: url} for website, instagram, facebook, youtube, twitter, linkedin')),
                ('featured_catalog', models.JSONField(blank=True, default=list, help_text='Up to six property ids shown first on the micro-site')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('partner', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='website', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Partner Website',
                'verbose_name_plural': 'Partner Websites',
            },
        ),
        migrations.CreateModel(
            name='WebsiteSlide',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('banner_image', models.FileField(blank=True, upload_to='marketing/slides/')),
                ('link_url', models.URLField(blank=True)),
                ('position', models.PositiveIntegerField(default=0)),
                ('website', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='slides', to='marketing.partnerwebsite')),
            ],
            options={
                'ordering': ['position', 'id'],
            },
        ),
    ]
