"""TLS certificate inspection and config snippet tools."""

import re
from string import Template

from nginxtools.core.exceptions import E_VALIDATION
from nginxtools.core.tool_protocol import ToolCall, ToolDefinition, ToolResult
from nginxtools.tools.base import BaseTool, ToolContext
from nginxtools.tools.report import render_command_result

CERT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+\.(pem|crt|cer)$")
HOSTNAME_PATTERN = re.compile(
    r"^(\*\.)?([A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}$"
)

SSL_SERVER_TEMPLATE = Template(
    """server {
    listen 443 ssl;
    http2 on;
    server_name $domain;

    ssl_certificate     $ssl_dir/$domain.crt;
    ssl_certificate_key $ssl_dir/$domain.key;

    ssl_protocols TLSv1.2 TLSv1.3;
    ssl_prefer_server_ciphers off;
    ssl_session_cache shared:SSL:10m;
    ssl_session_timeout 1d;
    ssl_session_tickets off;

    add_header Strict-Transport-Security "max-age=63072000" always;

    location / {
        proxy_pass http://$upstream;
        proxy_set_header Host $$host;
        proxy_set_header X-Real-IP $$remote_addr;
        proxy_set_header X-Forwarded-For $$proxy_add_x_forwarded_for;
        proxy_set_header X-Forwarded-Proto $$scheme;
    }
}

server {
    listen 80;
    server_name $domain;
    return 301 https://$$host$$request_uri;
}"""
)


class ListCertificatesTool(BaseTool):
    """List the certificate directory inside the container."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        argv = context.compose(
            "exec", "-T", context.config.service_name, "ls", "-la", context.config.ssl_dir
        )
        result = await context.executor.execute(argv)
        return render_command_result(
            f"TLS certificates in {context.config.ssl_dir}",
            argv,
            result,
            hints=[
                f"Mount your certificates into the container at {context.config.ssl_dir}",
                "Set NGINX_SSL_DIR if certificates live elsewhere",
            ],
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_list_certificates",
            description="List TLS certificate files available to NGINX",
        )


class CertificateInfoTool(BaseTool):
    """Show subject, issuer and validity dates of one certificate."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        filename = call.arguments.get("filename")

        if not isinstance(filename, str) or not filename:
            return ToolResult(
                success=False,
                error="filename is required",
                error_code=E_VALIDATION,
            )
        if not CERT_NAME_PATTERN.match(filename):
            return ToolResult(
                success=False,
                error=(
                    "filename must be a plain .pem, .crt or .cer file name "
                    "inside the certificate directory"
                ),
                error_code=E_VALIDATION,
            )

        cert_path = f"{context.config.ssl_dir.rstrip('/')}/{filename}"
        argv = context.compose(
            "exec",
            "-T",
            context.config.service_name,
            "openssl",
            "x509",
            "-in",
            cert_path,
            "-noout",
            "-subject",
            "-issuer",
            "-dates",
        )
        result = await context.executor.execute(argv)
        return render_command_result(
            f"Certificate {filename}",
            argv,
            result,
            hints=[
                "Use nginx_list_certificates to see available files",
                "Check that openssl is installed in the NGINX image",
            ],
        )

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_certificate_info",
            description="Show subject, issuer and expiry dates of a TLS certificate",
            parameters={
                "type": "object",
                "properties": {
                    "filename": {
                        "type": "string",
                        "description": "Certificate file name, e.g. example.com.crt",
                    }
                },
                "required": ["filename"],
            },
        )


class SslConfigTemplateTool(BaseTool):
    """Render an HTTPS server block for a domain."""

    async def execute(self, call: ToolCall, context: ToolContext) -> ToolResult:
        domain = call.arguments.get("domain")
        upstream = call.arguments.get("upstream", "127.0.0.1:8000")

        if not isinstance(domain, str) or not HOSTNAME_PATTERN.match(domain):
            return ToolResult(
                success=False,
                error="domain must be a valid hostname, e.g. example.com",
                error_code=E_VALIDATION,
            )
        if not isinstance(upstream, str) or not re.match(r"^[A-Za-z0-9.:_-]+$", upstream):
            return ToolResult(
                success=False,
                error="upstream must be host:port",
                error_code=E_VALIDATION,
            )

        snippet = SSL_SERVER_TEMPLATE.substitute(
            domain=domain,
            ssl_dir=context.config.ssl_dir.rstrip("/"),
            upstream=upstream,
        )
        text = (
            f"🔒 TLS server block for {domain}\n\n"
            f"```nginx\n{snippet}\n```\n\n"
            "💡 Next steps:\n"
            f"- Place {domain}.crt and {domain}.key in {context.config.ssl_dir}\n"
            "- Add the block to nginx.conf, then run nginx_test_config and nginx_reload"
        )
        return ToolResult(success=True, output=text, data={"snippet": snippet})

    def get_definition(self) -> ToolDefinition:
        return ToolDefinition(
            name="nginx_ssl_config_template",
            description="Generate an NGINX HTTPS server block for a domain",
            parameters={
                "type": "object",
                "properties": {
                    "domain": {"type": "string", "description": "Server name, e.g. example.com"},
                    "upstream": {
                        "type": "string",
                        "description": "Backend host:port to proxy to",
                        "default": "127.0.0.1:8000",
                    },
                },
                "required": ["domain"],
            },
        )
