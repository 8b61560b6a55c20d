"""JavaScript expressions evaluated in the bookmarks page."""

import json

BOOKMARKS_URL = "https://x.com/i/bookmarks"

READY_CHECK_SCRIPT = r"""
(() => {
  const isBookmarksPage = window.location.href.includes('/i/bookmarks');
  const ready = document.readyState === 'interactive' || document.readyState === 'complete';
  const hasColumn = document.querySelector('[data-testid="primaryColumn"]') !== null;
  const hasTweet = document.querySelector('article[data-testid="tweet"]') !== null;
  const loadingSpinner = document.querySelector('[aria-label="Loading timeline"]') !== null;
  return isBookmarksPage && ready && (hasTweet || hasColumn) && !loadingSpinner;
})()
"""

# Clicks every visible "Show more" control and returns the click count.
EXPAND_SCRIPT = r"""
(() => {
  const visible = (el) => {
    const rect = el.getBoundingClientRect();
    return rect.bottom > 0 && rect.top < window.innerHeight && rect.width > 0 && rect.height > 0;
  };

  const candidates = Array.from(document.querySelectorAll('div[role="button"], span'));
  let clicks = 0;
  for (const node of candidates) {
    const label = (node.textContent || '').trim().toLowerCase();
    if (label !== 'show more') continue;

    const target = node.closest('div[role="button"]') || node;
    if (!visible(target)) continue;
    target.dispatchEvent(new MouseEvent('click', { bubbles: true, cancelable: true, view: window }));
    clicks += 1;
  }
  return clicks;
})()
"""

SCROLL_SCRIPT = r"""
(() => {
  const currentHeight = document.documentElement.scrollHeight;
  window.scrollBy({ top: window.innerHeight * 1.5, behavior: 'instant' });
  return currentHeight;
})()
"""

EXTRACT_SCRIPT = r"""
(() => {
  const normalize = (value) => (value || '').replace(/\s+/g, ' ').trim();

  const parseCount = (raw) => {
    if (!raw) return 0;
    const cleaned = String(raw).replace(/,/g, '').trim();
    const match = cleaned.match(/([0-9]*\.?[0-9]+)\s*([KMB])?/i);
    if (!match) return 0;
    let number = Number.parseFloat(match[1]);
    const suffix = (match[2] || '').toUpperCase();
    if (suffix === 'K') number *= 1_000;
    if (suffix === 'M') number *= 1_000_000;
    if (suffix === 'B') number *= 1_000_000_000;
    return Number.isFinite(number) ? Math.round(number) : 0;
  };

  const metric = (article, testId) => {
    const metricNode = article.querySelector(`[data-testid="${testId}"]`);
    if (!metricNode) return 0;
    return parseCount(normalize(metricNode.innerText || metricNode.textContent));
  };

  const rows = [];
  for (const article of document.querySelectorAll('article[data-testid="tweet"]')) {
    const statusLink = article.querySelector('a[href*="/status/"]');
    if (!statusLink) continue;

    const permalink = statusLink.href;
    let id = '';
    let handleFromURL = '';
    try {
      const segments = new URL(permalink, window.location.origin).pathname.split('/').filter(Boolean);
      const statusIndex = segments.indexOf('status');
      if (statusIndex >= 0 && segments[statusIndex + 1]) id = segments[statusIndex + 1];
      if (statusIndex > 0 && segments[statusIndex - 1]) handleFromURL = segments[statusIndex - 1];
    } catch (_) {}

    const textNode = article.querySelector('[data-testid="tweetText"]');
    const text = normalize(textNode ? (textNode.innerText || textNode.textContent) : '');

    const timeNode = article.querySelector('time');
    const timestamp = timeNode ? (timeNode.getAttribute('datetime') || '') : '';

    let authorName = '';
    let authorHandle = handleFromURL ? `@${handleFromURL.replace(/^@/, '')}` : '';
    const userNameNode = article.querySelector('[data-testid="User-Name"]');
    if (userNameNode) {
      const spans = Array.from(userNameNode.querySelectorAll('span')).map((item) => normalize(item.textContent));
      const explicitHandle = spans.find((item) => item.startsWith('@'));
      const explicitName = spans.find((item) => item.length > 0 && !item.startsWith('@'));
      if (explicitName) authorName = explicitName;
      if (explicitHandle) authorHandle = explicitHandle;
    }
    if (!authorName && authorHandle) authorName = authorHandle.replace(/^@/, '');

    const folderNode = article.closest('[data-bookmark-folder], [data-folder-name], [aria-label*="folder"], [aria-label*="Folder"]');
    const folder = folderNode
      ? normalize(
          folderNode.getAttribute('data-bookmark-folder') ||
          folderNode.getAttribute('data-folder-name') ||
          folderNode.getAttribute('aria-label') ||
          ''
        )
      : null;

    rows.push({
      id: id || permalink,
      authorName: authorName || authorHandle || 'Unknown',
      authorHandle: authorHandle || '@unknown',
      text: text,
      url: permalink,
      timestamp: timestamp,
      likes: metric(article, 'like'),
      retweets: metric(article, 'retweet'),
      replies: metric(article, 'reply'),
      bookmarks: metric(article, 'bookmark'),
      hasMedia: article.querySelector('[data-testid="tweetPhoto"], [data-testid="videoPlayer"], video') !== null,
      folder: folder || null
    });
  }
  return rows;
})()
"""


def navigation_script(url: str) -> str:
    """Expression that navigates through window.location."""
    return f"window.location.href = {json.dumps(url)}; true;"
