"""
Configuração do Gunicorn para o site de vendas.

O formato de log inclui o tempo de resposta em microssegundos no final.
Para usar: gunicorn sales_portal.wsgi:application -c gunicorn.conf.py
"""

import os

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", 2))
worker_class = "sync"
threads = int(os.environ.get("GUNICORN_THREADS", 4))

# A chamada à PushinPay segura o worker; o timeout precisa cobrir PUSHINPAY_TIMEOUT
timeout = int(os.environ.get("GUNICORN_TIMEOUT", 45))

accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s - - %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

capture_output = True
