"""桌面集成文件模板：.desktop、AppStream 元数据、维护脚本"""

from __future__ import annotations

from xml.sax.saxutils import escape

from wfpack.core.config import Config

_DESKTOP_ENTRY = """\
[Desktop Entry]
Version=1.0
Name={display_name}
GenericName=Web Browser
Comment=Privacy-focused web browser
Exec={exe} %u
Icon={name}
Terminal=false
Type=Application
MimeType=text/html;text/xml;application/xhtml+xml;application/vnd.mozilla.xul+xml;text/mml;x-scheme-handler/http;x-scheme-handler/https;
Categories=Network;WebBrowser;
StartupNotify=true
StartupWMClass={name}
Actions=new-window;new-private-window;

[Desktop Action new-window]
Name=Open a New Window
Exec={exe} --new-window %u

[Desktop Action new-private-window]
Name=Open a New Private Window
Exec={exe} --private-window %u
"""

_APPDATA = """\
<?xml version="1.0" encoding="UTF-8"?>
<component type="desktop-application">
  <id>{name}</id>
  <name>{display_name}</name>
  <summary>Privacy-focused web browser</summary>
  <metadata_license>CC0-1.0</metadata_license>
  <project_license>MPL-2.0</project_license>
  <url type="homepage">{homepage}</url>
  <launchable type="desktop-id">{name}.desktop</launchable>
</component>
"""

# 刷新工具缺失或失败都不能让 dpkg 认为维护脚本出错
MAINTAINER_SCRIPT = """\
#!/bin/sh
set -e
if command -v update-desktop-database >/dev/null 2>&1; then
    update-desktop-database -q /usr/share/applications || true
fi
if command -v gtk-update-icon-cache >/dev/null 2>&1; then
    gtk-update-icon-cache -q /usr/share/icons/hicolor || true
fi
"""

HOOK_NAMES = ("postinst", "postrm")


def render_desktop_entry(config: Config) -> str:
    return _DESKTOP_ENTRY.format(
        display_name=config.display_name,
        name=config.pkg_name,
        exe=f"{config.app_dir}/{config.pkg_name}",
    )


def render_appdata(config: Config) -> str:
    return _APPDATA.format(
        name=escape(config.pkg_name),
        display_name=escape(config.display_name),
        homepage=escape(config.homepage),
    )
