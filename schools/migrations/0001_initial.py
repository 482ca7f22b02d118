import django.core.validators
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
            name='Grade',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('level', models.PositiveIntegerField(unique=True, verbose_name='Level')),
            ],
            options={
                'verbose_name': 'Grade',
                'verbose_name_plural': 'Grades',
                'ordering': ['level'],
            },
        ),
        migrations.CreateModel(
            name='Teacher',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('username', models.CharField(error_messages={'unique': 'This account number is already in use. Please use another one.'}, max_length=6, unique=True, validators=[django.core.validators.RegexValidator(code='invalid_account_number', message='The account number must be exactly 6 numeric digits.', regex='^\\d{6}$')], verbose_name='Account number')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('surname', models.CharField(max_length=100, verbose_name='Surname')),
                ('email', models.EmailField(blank=True, error_messages={'unique': 'This email address is already in use. Please use another one.'}, max_length=254, null=True, unique=True, verbose_name='Email')),
                ('phone', models.CharField(blank=True, error_messages={'unique': 'This phone number is already in use. Please use another one.'}, max_length=20, null=True, unique=True, verbose_name='Phone')),
                ('address', models.CharField(max_length=255, verbose_name='Address')),
                ('img', models.ImageField(blank=True, null=True, upload_to='people/', verbose_name='Photo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('blood_type', models.CharField(max_length=5, verbose_name='Blood Type')),
                ('sex', models.CharField(choices=[('MALE', 'Male'), ('FEMALE', 'Female')], max_length=6, verbose_name='Sex')),
                ('birthday', models.DateField(verbose_name='Birthday')),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='teacher_profile', to=settings.AUTH_USER_MODEL, verbose_name='Login')),
            ],
            options={
                'verbose_name': 'Teacher',
                'verbose_name_plural': 'Teachers',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Parent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('username', models.CharField(error_messages={'unique': 'This account number is already in use. Please use another one.'}, max_length=6, unique=True, validators=[django.core.validators.RegexValidator(code='invalid_account_number', message='The account number must be exactly 6 numeric digits.', regex='^\\d{6}$')], verbose_name='Account number')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('surname', models.CharField(max_length=100, verbose_name='Surname')),
                ('email', models.EmailField(blank=True, error_messages={'unique': 'This email address is already in use. Please use another one.'}, max_length=254, null=True, unique=True, verbose_name='Email')),
                ('phone', models.CharField(blank=True, error_messages={'unique': 'This phone number is already in use. Please use another one.'}, max_length=20, null=True, unique=True, verbose_name='Phone')),
                ('address', models.CharField(max_length=255, verbose_name='Address')),
                ('img', models.ImageField(blank=True, null=True, upload_to='people/', verbose_name='Photo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='parent_profile', to=settings.AUTH_USER_MODEL, verbose_name='Login')),
            ],
            options={
                'verbose_name': 'Parent',
                'verbose_name_plural': 'Parents',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='SchoolClass',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(error_messages={'unique': 'A class with this name already exists. Please choose another name.'}, max_length=50, unique=True, verbose_name='Name')),
                ('capacity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='Capacity')),
                ('grade', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='classes', to='schools.grade', verbose_name='Grade')),
                ('supervisor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='supervised_classes', to='schools.teacher', verbose_name='Supervisor')),
            ],
            options={
                'verbose_name': 'Class',
                'verbose_name_plural': 'Classes',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('username', models.CharField(error_messages={'unique': 'This account number is already in use. Please use another one.'}, max_length=6, unique=True, validators=[django.core.validators.RegexValidator(code='invalid_account_number', message='The account number must be exactly 6 numeric digits.', regex='^\\d{6}$')], verbose_name='Account number')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('surname', models.CharField(max_length=100, verbose_name='Surname')),
                ('email', models.EmailField(blank=True, error_messages={'unique': 'This email address is already in use. Please use another one.'}, max_length=254, null=True, unique=True, verbose_name='Email')),
                ('phone', models.CharField(blank=True, error_messages={'unique': 'This phone number is already in use. Please use another one.'}, max_length=20, null=True, unique=True, verbose_name='Phone')),
                ('address', models.CharField(max_length=255, verbose_name='Address')),
                ('img', models.ImageField(blank=True, null=True, upload_to='people/', verbose_name='Photo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('blood_type', models.CharField(max_length=5, verbose_name='Blood Type')),
                ('sex', models.CharField(choices=[('MALE', 'Male'), ('FEMALE', 'Female')], max_length=6, verbose_name='Sex')),
                ('birthday', models.DateField(verbose_name='Birthday')),
                ('grade', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='students', to='schools.grade', verbose_name='Grade')),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='students', to='schools.parent', verbose_name='Parent')),
                ('school_class', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='students', to='schools.schoolclass', verbose_name='Class')),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='student_profile', to=settings.AUTH_USER_MODEL, verbose_name='Login')),
            ],
            options={
                'verbose_name': 'Student',
                'verbose_name_plural': 'Students',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Subject',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(error_messages={'unique': 'A subject with this name already exists.'}, max_length=100, unique=True, verbose_name='Subject Name')),
                ('teachers', models.ManyToManyField(blank=True, related_name='subjects', to='schools.teacher', verbose_name='Teachers')),
            ],
            options={
                'verbose_name': 'Subject',
                'verbose_name_plural': 'Subjects',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Lesson',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('day', models.PositiveSmallIntegerField(choices=[(1, 'Monday'), (2, 'Tuesday'), (3, 'Wednesday'), (4, 'Thursday'), (5, 'Friday')], verbose_name='Day')),
                ('start_time', models.TimeField(verbose_name='Start Time')),
                ('end_time', models.TimeField(verbose_name='End Time')),
                ('school_class', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lessons', to='schools.schoolclass', verbose_name='Class')),
                ('subject', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lessons', to='schools.subject', verbose_name='Subject')),
                ('teacher', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lessons', to='schools.teacher', verbose_name='Teacher')),
            ],
            options={
                'verbose_name': 'Lesson',
                'verbose_name_plural': 'Lessons',
                'ordering': ['day', 'start_time'],
            },
        ),
    ]
