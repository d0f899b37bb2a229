"""
Django settings for Yardman tests.
"""

SECRET_KEY = 'yardman-tests'

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'yardman',
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

LANGUAGE_CODE = 'en-us'
USE_I18N = True
USE_TZ = True

YARDMAN = {
    'CATALOG_BACKEND': 'yardman.adapters.memory.InMemoryCatalog',
    'LEDGER_BACKEND': 'yardman.adapters.memory.InMemoryLedger',
    'CART_BACKEND': 'yardman.adapters.memory.InMemoryCart',
}
