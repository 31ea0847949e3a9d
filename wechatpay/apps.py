from django.apps import AppConfig


class WeChatPayAppConfig(AppConfig):
    name = 'wechatpay'
    verbose_name = 'WeChat Pay'
