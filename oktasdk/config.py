CONFIG = {
    'client': {
        'org_url': None,
        'token': None,
        'connection_timeout': 30,
        'executor': 'oktasdk.http.executor:RequestsExecutor',
        'cache': {
            'enabled': True,
            'manager': 'oktasdk.cache.components:DefaultCacheManager',
            'default_ttl': 300,
            'default_tti': 300,
            'max_size': 1000,
        },
    },
    'user_agent': '',
    'resource_factory': {
        'configs': [
            'oktasdk.resources:RESOURCE_FACTORY_CONFIG',
        ],
    },
    'discriminators': {
        'application': {
            'type': 'oktasdk.resources.applications:Application',
            'field': 'signOnMode',
            'values': {
                'AUTO_LOGIN': 'oktasdk.resources.applications:AutoLoginApplication',
                'BASIC_AUTH': 'oktasdk.resources.applications:BasicAuthApplication',
                'BOOKMARK': 'oktasdk.resources.applications:BookmarkApplication',
                'BROWSER_PLUGIN': 'oktasdk.resources.applications:BrowserPluginApplication',
                'OPENID_CONNECT': 'oktasdk.resources.applications:OpenIdConnectApplication',
                'SAML_1_1': 'oktasdk.resources.applications:SamlApplication',
                'SAML_2_0': 'oktasdk.resources.applications:SamlApplication',
                'SECURE_PASSWORD_STORE': 'oktasdk.resources.applications:SecurePasswordStoreApplication',
                'WS_FEDERATION': 'oktasdk.resources.applications:WsFederationApplication',
            },
        },
        'policy': {
            'type': 'oktasdk.resources.policies:Policy',
            'field': 'type',
            'values': {
                'ACCESS_POLICY': 'oktasdk.resources.policies:AccessPolicy',
                'IDP_DISCOVERY': 'oktasdk.resources.policies:IdentityProviderPolicy',
                'MFA_ENROLL': 'oktasdk.resources.policies:MultifactorEnrollmentPolicy',
                'OKTA_SIGN_ON': 'oktasdk.resources.policies:OktaSignOnPolicy',
                'PASSWORD': 'oktasdk.resources.policies:PasswordPolicy',
                'PROFILE_ENROLLMENT': 'oktasdk.resources.policies:ProfileEnrollmentPolicy',
            },
        },
        'policy_rule': {
            'type': 'oktasdk.resources.policies:PolicyRule',
            'field': 'type',
            'values': {
                'ACCESS_POLICY': 'oktasdk.resources.policies:AccessPolicyRule',
                'IDP_DISCOVERY': 'oktasdk.resources.policies:AuthorizationServerPolicyRule',
                'PASSWORD': 'oktasdk.resources.policies:PasswordPolicyRule',
                'PROFILE_ENROLLMENT': 'oktasdk.resources.policies:ProfileEnrollmentPolicyRule',
                'SIGN_ON': 'oktasdk.resources.policies:OktaSignOnPolicyRule',
            },
        },
        'user_factor': {
            'type': 'oktasdk.resources.factors:UserFactor',
            'field': 'factorType',
            'values': {
                'call': 'oktasdk.resources.factors:CallUserFactor',
                'email': 'oktasdk.resources.factors:EmailUserFactor',
                'push': 'oktasdk.resources.factors:PushUserFactor',
                'sms': 'oktasdk.resources.factors:SmsUserFactor',
                'question': 'oktasdk.resources.factors:SecurityQuestionUserFactor',
                'token': 'oktasdk.resources.factors:TokenUserFactor',
                'token:hardware': 'oktasdk.resources.factors:HardwareUserFactor',
                'token:hotp': 'oktasdk.resources.factors:CustomHotpUserFactor',
                'token:software:totp': 'oktasdk.resources.factors:TotpUserFactor',
                'u2f': 'oktasdk.resources.factors:U2fUserFactor',
                'web': 'oktasdk.resources.factors:WebUserFactor',
                'webauthn': 'oktasdk.resources.factors:WebAuthnUserFactor',
            },
        },
    },
}
