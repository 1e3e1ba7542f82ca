import accounts.models
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('user_code', models.CharField(blank=True, help_text='Public identifier, role prefix + 6 digits (e.g. PAF482913)', max_length=20, unique=True)),
                ('name', models.CharField(blank=True, max_length=200)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('whatsapp', models.CharField(blank=True, max_length=20)),
                ('role', models.CharField(choices=[('affiliate', 'Affiliate Partner'), ('super_affiliate', 'Super Affiliate Partner'), ('associate', 'Associate Partner'), ('channel', 'Channel Partner'), ('franchisee', 'Franchisee'), ('admin', 'Admin'), ('seller', 'Seller'), ('customer', 'Customer')], db_index=True, default='customer', max_length=20)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('pending', 'Pending'), ('pending_approval', 'Pending Approval'), ('pending_verification', 'Pending Verification'), ('pending_upgrade', 'Pending Upgrade'), ('rejected', 'Rejected'), ('suspended', 'Suspended')], db_index=True, default='active', max_length=30)),
                ('profile_image', models.FileField(blank=True, upload_to='profiles/')),
                ('dob', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=[('male', 'Male'), ('female', 'Female'), ('other', 'Other')], max_length=10)),
                ('qualification', models.CharField(blank=True, max_length=100)),
                ('address', models.TextField(blank=True)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(blank=True, max_length=100)),
                ('pincode', models.CharField(blank=True, max_length=10)),
                ('business_name', models.CharField(blank=True, max_length=200)),
                ('business_logo', models.FileField(blank=True, upload_to='business_logos/')),
                ('business_type', models.CharField(blank=True, max_length=100)),
                ('gstn', models.CharField(blank=True, max_length=20)),
                ('business_age', models.PositiveIntegerField(blank=True, null=True)),
                ('area_covered', models.CharField(blank=True, max_length=200)),
                ('aadhar_number', models.CharField(blank=True, max_length=20)),
                ('aadhar_file', models.FileField(blank=True, upload_to='kyc/aadhar/')),
                ('pan_number', models.CharField(blank=True, max_length=20)),
                ('pan_file', models.FileField(blank=True, upload_to='kyc/pan/')),
                ('rera_number', models.CharField(blank=True, max_length=50)),
                ('rera_certificate', models.FileField(blank=True, upload_to='kyc/rera/')),
                ('kyc_status', models.CharField(choices=[('verified', 'Verified'), ('pending', 'Pending'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('permissions', models.JSONField(blank=True, default=list)),
                ('payment_status', models.CharField(blank=True, choices=[('paid', 'Paid'), ('pending', 'Pending'), ('pending_approval', 'Pending Approval'), ('not_required', 'Not Required'), ('failed', 'Failed')], max_length=20)),
                ('payment_details', models.JSONField(blank=True, null=True)),
                ('deactivation_reason', models.TextField(blank=True)),
                ('reactivation_reason', models.TextField(blank=True)),
                ('suspension_reason', models.TextField(blank=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('upgrade_request', models.JSONField(blank=True, help_text="{'new_role': ..., 'requested_at': ...} while an upgrade is pending", null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
                ('team_lead', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='team_members', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['role', 'status'], name='accounts_us_role_2a9a8c_idx')],
            },
            managers=[
                ('objects', accounts.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='RegistrationPayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('merchant_transaction_id', models.CharField(max_length=64, unique=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('status', models.CharField(choices=[('initiated', 'Initiated'), ('success', 'Success'), ('failed', 'Failed')], default='initiated', max_length=20)),
                ('provider_reference_id', models.CharField(blank=True, max_length=100)),
                ('gateway_transaction_id', models.CharField(blank=True, max_length=100)),
                ('callback_payload', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registration_payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Registration Payment',
                'verbose_name_plural': 'Registration Payments',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='TeamRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=20)),
                ('requested_at', models.DateTimeField(auto_now_add=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='received_team_requests', to=settings.AUTH_USER_MODEL)),
                ('requester', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sent_team_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Team Request',
                'verbose_name_plural': 'Team Requests',
                'ordering': ['-requested_at'],
            },
        ),
    ]
